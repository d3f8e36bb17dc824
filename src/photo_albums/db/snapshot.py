"""Whole-graph snapshot persistence for users, albums and photos."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from photo_albums.db.models import Album, Photo, User
from photo_albums.db.schema import (
    SNAPSHOT_FORMAT_VERSION,
    AlbumPhotoRow,
    AlbumRow,
    Base,
    PhotoRow,
    PhotoTagRow,
    SnapshotInfo,
    UserRow,
)

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot cannot be read or written."""
    pass


class SnapshotFile:
    """Reads and writes the complete user list as one SQLite file.

    Every write builds a fresh database in a temporary file next to the
    snapshot and renames it over the old one, so readers only ever see a
    complete snapshot.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        """True if there is a non-empty snapshot on disk."""
        return self._path.is_file() and self._path.stat().st_size > 0

    def read(self) -> list[User]:
        """Load the full user graph. Returns [] when there is no snapshot."""
        if not self.exists():
            return []

        engine = create_engine(f"sqlite:///{self._path}", echo=False)
        Session = sessionmaker(bind=engine)
        try:
            with Session() as session:
                version = session.get(SnapshotInfo, "format_version")
                if version is None or version.value != str(SNAPSHOT_FORMAT_VERSION):
                    found = version.value if version else None
                    raise SnapshotError(
                        f"Unsupported snapshot format {found!r} in {self._path}"
                    )
                photos = {
                    row.id: self._row_to_photo(row)
                    for row in session.query(PhotoRow).all()
                }
                users = [
                    self._row_to_user(row, photos)
                    for row in session.query(UserRow).order_by(UserRow.position)
                ]
        except (SQLAlchemyError, ValueError, KeyError, TypeError) as e:
            # Bad stored values or dangling album entries mean a damaged file
            raise SnapshotError(f"Failed to read snapshot {self._path}: {e}") from e
        finally:
            engine.dispose()

        logger.debug(f"Loaded {len(users)} users from {self._path}")
        return users

    def write(self, users: list[User]) -> None:
        """Replace the snapshot with the given user list."""
        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f"{self._path.name}.", suffix=".tmp",
                dir=self._path.parent,
            )
            os.close(fd)
            tmp_path = Path(tmp_name)

            engine = create_engine(f"sqlite:///{tmp_path}", echo=False)
            try:
                Base.metadata.create_all(engine)
                Session = sessionmaker(bind=engine)
                with Session() as session:
                    now = datetime.now(timezone.utc).isoformat()
                    session.add_all([
                        SnapshotInfo(
                            key="format_version",
                            value=str(SNAPSHOT_FORMAT_VERSION),
                        ),
                        SnapshotInfo(key="written_at", value=now),
                    ])
                    session.add_all(self._users_to_rows(users))
                    session.commit()
            finally:
                engine.dispose()

            os.replace(tmp_path, self._path)
        except (SQLAlchemyError, OSError) as e:
            raise SnapshotError(f"Failed to write snapshot {self._path}: {e}") from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()

        logger.debug(f"Wrote {len(users)} users to {self._path}")

    # --- Private helpers ---

    def _users_to_rows(self, users: list[User]) -> list[UserRow]:
        # One PhotoRow per file path, shared by every album entry
        photo_rows: dict[str, PhotoRow] = {}

        def photo_row(photo: Photo) -> PhotoRow:
            row = photo_rows.get(photo.file_path)
            if row is None:
                row = PhotoRow(
                    file_path=photo.file_path,
                    caption=photo.caption,
                    date_time=photo.date_time,
                    tags=[
                        PhotoTagRow(tag_type=tag_type, tag_value=tag_value, position=i)
                        for i, (tag_type, tag_value) in enumerate(photo.tags.items())
                    ],
                )
                photo_rows[photo.file_path] = row
            return row

        return [
            UserRow(
                username=user.username,
                position=u,
                albums=[
                    AlbumRow(
                        name=album.name,
                        position=a,
                        entries=[
                            AlbumPhotoRow(photo=photo_row(photo), position=p)
                            for p, photo in enumerate(album.photos)
                        ],
                    )
                    for a, album in enumerate(user.albums)
                ],
            )
            for u, user in enumerate(users)
        ]

    def _row_to_photo(self, row: PhotoRow) -> Photo:
        return Photo(
            file_path=row.file_path,
            date_time=row.date_time,
            caption=row.caption or "",
            tags={tag.tag_type: tag.tag_value for tag in row.tags},
        )

    def _row_to_user(self, row: UserRow, photos: dict[int, Photo]) -> User:
        user = User(row.username)
        for album_row in row.albums:
            album = Album(album_row.name)
            for entry in album_row.entries:
                album.add_photo(photos[entry.photo_id])
            user.add_album(album)
        return user
