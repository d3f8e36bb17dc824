"""Data models for Photo Albums."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(eq=False)
class Photo:
    """A photo file with its caption, timestamp and tags.

    Photos are identified by file path: two instances with the same path
    are equal and interchangeable as collection members.
    """

    file_path: str
    date_time: datetime = field(default_factory=datetime.now)
    caption: str = ""
    tags: dict[str, str] = field(default_factory=dict)  # tag type -> value

    def add_tag(self, tag_type: str, tag_value: str) -> None:
        """Set the value for a tag type, replacing any previous value."""
        self.tags[tag_type] = tag_value

    def remove_tag(self, tag_type: str) -> bool:
        return self.tags.pop(tag_type, None) is not None

    def has_tag(self, tag_type: str) -> bool:
        return tag_type in self.tags

    def tag_value(self, tag_type: str) -> str | None:
        return self.tags.get(tag_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Photo):
            return NotImplemented
        return self.file_path == other.file_path

    def __hash__(self) -> int:
        return hash(self.file_path)


@dataclass(eq=False)
class Album:
    """A named, ordered collection of photos."""

    name: str
    photos: list[Photo] = field(default_factory=list)

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    @property
    def cover_photo(self) -> Photo | None:
        return self.photos[0] if self.photos else None

    @property
    def earliest_date(self) -> datetime | None:
        if not self.photos:
            return None
        return min(photo.date_time for photo in self.photos)

    @property
    def latest_date(self) -> datetime | None:
        if not self.photos:
            return None
        return max(photo.date_time for photo in self.photos)

    def add_photo(self, photo: Photo) -> None:
        """Append a photo. Callers check containment first."""
        self.photos.append(photo)

    def remove_photo(self, photo: Photo) -> bool:
        """Remove the first photo with the same file path."""
        try:
            self.photos.remove(photo)
        except ValueError:
            return False
        return True

    def contains(self, photo: Photo) -> bool:
        return photo in self.photos

    def __contains__(self, photo: object) -> bool:
        return photo in self.photos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Album):
            return NotImplemented
        return self.name == other.name

    __hash__ = None  # names change on rename

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False)
class User:
    """A user account and its ordered albums."""

    username: str
    albums: list[Album] = field(default_factory=list)

    def add_album(self, album: Album) -> None:
        self.albums.append(album)

    def remove_album(self, album: Album) -> bool:
        try:
            self.albums.remove(album)
        except ValueError:
            return False
        return True

    def get_album(self, name: str) -> Album | None:
        """Get an album by exact name."""
        for album in self.albums:
            if album.name == name:
                return album
        return None

    def has_album_named(self, name: str, exclude: Album | None = None) -> bool:
        """Check for an album whose name matches ignoring case.

        ``exclude`` skips one album (by identity), so a rename can keep
        the album's own name with different casing.
        """
        wanted = name.lower()
        return any(
            album.name.lower() == wanted
            for album in self.albums
            if album is not exclude
        )

    def photos(self) -> list[Photo]:
        """All photos across albums, first occurrence per file path."""
        seen: set[str] = set()
        result: list[Photo] = []
        for album in self.albums:
            for photo in album.photos:
                if photo.file_path not in seen:
                    seen.add(photo.file_path)
                    result.append(photo)
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.username == other.username

    def __hash__(self) -> int:
        return hash(self.username)

    def __str__(self) -> str:
        return self.username
