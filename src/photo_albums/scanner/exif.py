"""Photo timestamps from EXIF data, with file-time fallback."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from PIL import Image
from PIL.ExifTags import TAGS

from photo_albums.db.models import Photo

logger = logging.getLogger(__name__)

_EXIF_IFD = 0x8769


@dataclass
class ExifDates:
    """Datetime fields read from an image's EXIF block."""

    datetime_original: datetime | None = None
    datetime_digitized: datetime | None = None
    datetime_modified: datetime | None = None

    @property
    def best(self) -> datetime | None:
        return self.datetime_original or self.datetime_digitized or self.datetime_modified


def extract_exif_dates(filepath: str | Path) -> ExifDates:
    """Read EXIF datetimes from an image file.

    Images without EXIF (PNG, GIF, ...) or that cannot be opened give an
    empty ExifDates.
    """
    result = ExifDates()
    try:
        with Image.open(filepath) as img:
            exif_raw = img.getexif()
            if not exif_raw:
                return result

            # DateTimeOriginal usually lives in the Exif sub-IFD, not IFD0
            decoded: dict[str, Any] = {}
            for tag_id, value in exif_raw.items():
                decoded[TAGS.get(tag_id, str(tag_id))] = value
            for tag_id, value in exif_raw.get_ifd(_EXIF_IFD).items():
                decoded.setdefault(TAGS.get(tag_id, str(tag_id)), value)
    except Exception as e:
        logger.debug(f"No EXIF data for {filepath}: {e}")
        return result

    result.datetime_original = _parse_exif_datetime(decoded.get("DateTimeOriginal"))
    result.datetime_digitized = _parse_exif_datetime(decoded.get("DateTimeDigitized"))
    result.datetime_modified = _parse_exif_datetime(decoded.get("DateTime"))
    return result


def photo_datetime(filepath: str | Path) -> datetime:
    """Best timestamp for a photo: EXIF, then file mtime, then now."""
    taken = extract_exif_dates(filepath).best
    if taken is not None:
        return taken
    try:
        return datetime.fromtimestamp(os.path.getmtime(filepath))
    except OSError:
        return datetime.now()


def photo_from_file(filepath: str | Path) -> Photo:
    """Create a new Photo for a file, keyed by its absolute path."""
    path = os.path.abspath(filepath)
    return Photo(file_path=path, date_time=photo_datetime(path))


def _parse_exif_datetime(value: Any) -> datetime | None:
    """Parse EXIF datetime string (format: 'YYYY:MM:DD HH:MM:SS')."""
    if not value or not isinstance(value, str):
        return None
    formats = [
        "%Y:%m:%d %H:%M:%S",
        "%Y-%m-%d %H:%M:%S",
        "%Y:%m:%d",
        "%Y-%m-%d",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(value.strip().rstrip("\x00"), fmt)
        except ValueError:
            continue
    return None
