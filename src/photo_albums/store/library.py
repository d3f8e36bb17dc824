"""Session-scoped album and photo actions.

Each action validates its input against the logged-in user, applies the
change, saves through the UserStore and reports a short status message.
Rejected actions change nothing.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime

from photo_albums.config.config import ConfigManager
from photo_albums.db.models import Album, Photo, User
from photo_albums.query.search import search_by_date, search_by_tag
from photo_albums.scanner.exif import photo_from_file
from photo_albums.store.user_store import ReservedAccount, UserStore

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of a library action."""

    ok: bool
    message: str

    def __bool__(self) -> bool:
        return self.ok


def _fail(message: str) -> ActionResult:
    return ActionResult(False, message)


def _done(message: str) -> ActionResult:
    return ActionResult(True, message)


class PhotoLibrary:
    """Album and photo operations for the store's current session."""

    def __init__(self, store: UserStore, config: ConfigManager | None = None):
        self._store = store
        self._config = config or ConfigManager()
        formats = self._config.get("library.photo_formats", [])
        self._photo_formats = {fmt.lower().lstrip(".") for fmt in formats}

    @property
    def store(self) -> UserStore:
        return self._store

    @property
    def user(self) -> User | None:
        return self._store.current_user

    # --- Session ---

    def login(self, username: str) -> ActionResult:
        username = username.strip()
        if not username:
            return _fail("Username cannot be empty.")
        if not self._store.login(username):
            return _fail(f"User not found: {username}")
        return _done(f"Logged in as {username}")

    def logout(self) -> ActionResult:
        if self.user is None:
            return _fail("No user is logged in.")
        self._store.logout()
        return _done("Logged out.")

    # --- Administration ---

    def list_users(self) -> list[User]:
        if not self._store.is_current_admin():
            return []
        return self._store.get_all()

    def create_user(self, username: str) -> ActionResult:
        if not self._store.is_current_admin():
            return _fail("Only the admin can manage users.")
        username = username.strip()
        if not username:
            return _fail("Username cannot be empty.")
        if not self._store.create(username):
            return _fail(f"User already exists: {username}")
        return _done(f"User created: {username}")

    def delete_user(self, username: str) -> ActionResult:
        if not self._store.is_current_admin():
            return _fail("Only the admin can manage users.")
        username = username.strip()
        if not username:
            return _fail("No user selected.")
        if ReservedAccount.is_reserved(username):
            return _fail(f"Cannot delete reserved user: {username}")
        if not self._store.delete(username):
            return _fail(f"User not found: {username}")
        return _done(f"User deleted: {username}")

    # --- Albums ---

    def list_albums(self) -> list[Album]:
        if self.user is None:
            return []
        return list(self.user.albums)

    def create_album(self, name: str) -> ActionResult:
        if self.user is None:
            return _fail("No user is logged in.")
        name = name.strip()
        if not name:
            return _fail("Album name cannot be empty.")
        if self.user.has_album_named(name):
            return _fail("An album with this name already exists.")
        self.user.add_album(Album(name))
        self._store.save()
        return _done(f"Album created: {name}")

    def rename_album(self, name: str, new_name: str) -> ActionResult:
        album, error = self._album(name)
        if error is not None:
            return error
        new_name = new_name.strip()
        if not new_name:
            return _fail("Album name cannot be empty.")
        if self.user.has_album_named(new_name, exclude=album):
            return _fail("An album with this name already exists.")
        album.name = new_name
        self._store.save()
        return _done(f"Album renamed to: {new_name}")

    def delete_album(self, name: str) -> ActionResult:
        album, error = self._album(name)
        if error is not None:
            return error
        self.user.remove_album(album)
        logger.info(f"{self.user.username}: deleted album '{album.name}'")
        self._store.save()
        return _done(f"Album deleted: {album.name}")

    # --- Photos ---

    def add_photo(self, album_name: str, file_path: str) -> ActionResult:
        """Add a file to an album, reusing the existing Photo for its path."""
        album, error = self._album(album_name)
        if error is not None:
            return error
        path = os.path.abspath(file_path)
        if not os.path.isfile(path):
            return _fail(f"File not found: {file_path}")
        extension = os.path.splitext(path)[1].lower().lstrip(".")
        if extension not in self._photo_formats:
            return _fail(f"Unsupported file type: {file_path}")

        photo = self._store.resolve_photo(path)
        if photo is None:
            photo = self._store.register_photo(photo_from_file(path))
        if album.contains(photo):
            return _done("Photo is already in this album.")
        album.add_photo(photo)
        self._store.save()
        return _done(f"Photo added to: {album.name}")

    def remove_photo(self, album_name: str, file_path: str) -> ActionResult:
        album, photo, error = self._album_photo(album_name, file_path)
        if error is not None:
            return error
        album.remove_photo(photo)
        logger.debug(f"{self.user.username}: removed {photo.file_path} from '{album.name}'")
        self._store.save()
        return _done("Photo deleted.")

    def copy_targets(self, album_name: str, file_path: str) -> list[Album]:
        """Albums a photo can be copied or moved into."""
        album, photo, error = self._album_photo(album_name, file_path)
        if error is not None:
            return []
        return [
            other for other in self.user.albums
            if other is not album and not other.contains(photo)
        ]

    def copy_photo(self, album_name: str, target_name: str, file_path: str) -> ActionResult:
        return self._transfer(album_name, target_name, file_path, move=False)

    def move_photo(self, album_name: str, target_name: str, file_path: str) -> ActionResult:
        return self._transfer(album_name, target_name, file_path, move=True)

    def set_caption(self, album_name: str, file_path: str, caption: str) -> ActionResult:
        album, photo, error = self._album_photo(album_name, file_path)
        if error is not None:
            return error
        caption = caption.strip()
        if not caption:
            return _fail("Caption cannot be empty.")
        photo.caption = caption
        self._store.save()
        return _done(f"Photo renamed to: {caption}")

    def add_tag(
        self, album_name: str, file_path: str, tag_type: str, tag_value: str
    ) -> ActionResult:
        album, photo, error = self._album_photo(album_name, file_path)
        if error is not None:
            return error
        tag_type, tag_value = tag_type.strip(), tag_value.strip()
        if not tag_type or not tag_value:
            return _fail("Tag type and value cannot be empty.")
        photo.add_tag(tag_type, tag_value)
        self._store.save()
        return _done(f"Tag added: {tag_type}={tag_value}")

    def remove_tag(self, album_name: str, file_path: str, tag_type: str) -> ActionResult:
        album, photo, error = self._album_photo(album_name, file_path)
        if error is not None:
            return error
        tag_type = tag_type.strip()
        if not photo.remove_tag(tag_type):
            return _fail(f"Photo has no tag: {tag_type}")
        self._store.save()
        return _done(f"Tag removed: {tag_type}")

    # --- Search ---

    def search_by_date(
        self, start: date | datetime | None, end: date | datetime | None
    ) -> list[Photo]:
        if self.user is None:
            return []
        return search_by_date(self.user, start, end)

    def search_by_tag(self, query: str) -> list[Photo]:
        if self.user is None:
            return []
        return search_by_tag(self.user, query)

    # --- Private helpers ---

    def _album(self, name: str) -> tuple[Album | None, ActionResult | None]:
        if self.user is None:
            return None, _fail("No user is logged in.")
        album = self.user.get_album(name)
        if album is None:
            return None, _fail(f"Album not found: {name}")
        return album, None

    def _album_photo(
        self, album_name: str, file_path: str
    ) -> tuple[Album | None, Photo | None, ActionResult | None]:
        album, error = self._album(album_name)
        if error is not None:
            return None, None, error
        wanted = Photo(os.path.abspath(file_path))
        for photo in album.photos:
            if photo == wanted:
                return album, photo, None
        return album, None, _fail(f"Photo not in album: {file_path}")

    def _transfer(
        self, album_name: str, target_name: str, file_path: str, move: bool
    ) -> ActionResult:
        album, photo, error = self._album_photo(album_name, file_path)
        if error is not None:
            return error
        target = self.user.get_album(target_name)
        if target is None:
            return _fail(f"Album not found: {target_name}")
        if target is album:
            return _fail("Choose a different album.")
        if target.contains(photo):
            return _fail(f"Photo is already in: {target.name}")

        target.add_photo(photo)
        if move:
            album.remove_photo(photo)
        self._store.save()
        if move:
            return _done(f"Photo moved to: {target.name}")
        return _done(f"Photo copied to: {target.name}")
