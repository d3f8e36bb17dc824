"""Photo search by date range and by tag expression.

Tag expressions are a single clause or two clauses joined by one operator:
    location=Paris
    person=alice AND event=birthday
    color=red OR size=large

Grammar:
    query    = clause | clause ' AND ' clause | clause ' OR ' clause
    clause   = TYPE '=' VALUE

Type and value are matched case-insensitively. Anything else (a second
operator, an empty side, a missing or repeated '=') is malformed and
matches nothing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime

from photo_albums.db.models import Photo, User

logger = logging.getLogger(__name__)

_OPERATOR_RE = re.compile(r"\s(AND|OR)\s")


class QueryParseError(Exception):
    """Error raised when parsing a tag query fails."""
    pass


@dataclass
class TagClause:
    """A single type=value condition."""
    tag_type: str
    tag_value: str

    def matches(self, photo: Photo) -> bool:
        wanted_type = self.tag_type.lower()
        wanted_value = self.tag_value.lower()
        return any(
            tag_type.lower() == wanted_type and tag_value.lower() == wanted_value
            for tag_type, tag_value in photo.tags.items()
        )


@dataclass
class TagQuery:
    """One or two clauses, combined with AND/OR when there are two."""
    clauses: list[TagClause]
    operator: str | None = None   # None, "AND" or "OR"

    def matches(self, photo: Photo) -> bool:
        if self.operator == "OR":
            return any(clause.matches(photo) for clause in self.clauses)
        return all(clause.matches(photo) for clause in self.clauses)


def parse_tag_query(expression: str) -> TagQuery:
    """Parse a tag expression into a TagQuery.

    Examples:
        parse_tag_query('color=red')
        parse_tag_query('color=red AND size=large')

    Raises QueryParseError on malformed input.
    """
    text = expression.strip()
    if not text:
        raise QueryParseError("Empty query")

    # Padding lets a dangling operator ("color=red AND") split off an empty side
    parts = _OPERATOR_RE.split(f" {text} ")
    sides = [part.strip() for part in parts[0::2]]
    operators = parts[1::2]

    if len(operators) > 1:
        raise QueryParseError(
            f"Only one AND/OR is allowed, found {len(operators)}"
        )

    clauses = [_parse_clause(side) for side in sides]
    return TagQuery(
        clauses=clauses,
        operator=operators[0] if operators else None,
    )


def _parse_clause(text: str) -> TagClause:
    pieces = text.split("=")
    if len(pieces) != 2:
        raise QueryParseError(f"Expected type=value, got '{text}'")
    tag_type, tag_value = pieces[0].strip(), pieces[1].strip()
    if not tag_type or not tag_value:
        raise QueryParseError(f"Expected type=value, got '{text}'")
    return TagClause(tag_type=tag_type, tag_value=tag_value)


def search_by_tag(user: User, expression: str) -> list[Photo]:
    """Photos of ``user`` matching a tag expression.

    Malformed expressions return an empty list.
    """
    try:
        query = parse_tag_query(expression)
    except QueryParseError as e:
        logger.debug(f"Ignoring tag query {expression!r}: {e}")
        return []
    return [photo for photo in user.photos() if query.matches(photo)]


def search_by_date(
    user: User,
    start: date | datetime | None,
    end: date | datetime | None,
) -> list[Photo]:
    """Photos of ``user`` taken between ``start`` and ``end`` inclusive.

    Compared by calendar day. Both bounds are required; if either is
    missing the search returns nothing.
    """
    if start is None or end is None:
        return []
    start_day, end_day = _as_date(start), _as_date(end)
    return [
        photo for photo in user.photos()
        if start_day <= photo.date_time.date() <= end_day
    ]


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value

