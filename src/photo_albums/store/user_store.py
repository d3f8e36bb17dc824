"""User directory, session and persistence for Photo Albums."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

from photo_albums.config.config import ConfigManager
from photo_albums.db.models import Album, Photo, User
from photo_albums.db.snapshot import SnapshotError, SnapshotFile
from photo_albums.scanner.exif import photo_from_file

logger = logging.getLogger(__name__)


class ReservedAccount(str, Enum):
    """Accounts that always exist and can never be deleted."""

    ADMIN = "admin"
    STOCK = "stock"

    @classmethod
    def is_reserved(cls, username: str) -> bool:
        return username in {account.value for account in cls}


class UserStore:
    """Owns every user, the logged-in session and the snapshot on disk.

    The whole user graph is written out after each change. A failed write
    is logged and the in-memory state is kept as is.
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        config: ConfigManager | None = None,
    ):
        self._config = config or ConfigManager()
        self._snapshot = SnapshotFile(self._config.snapshot_path(data_dir))
        self._data_dir = self._snapshot.path.parent

        self._users: list[User] = []
        self._current_user: User | None = None
        self._photo_index: dict[str, Photo] = {}

        self._initialize()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot.path

    @property
    def current_user(self) -> User | None:
        return self._current_user

    # --- User directory ---

    def exists(self, username: str) -> bool:
        return any(user.username == username for user in self._users)

    def create(self, username: str) -> bool:
        """Add an empty user. Returns False if the username is taken."""
        if self.exists(username):
            return False
        self._users.append(User(username))
        logger.info(f"Created user '{username}'")
        self.save()
        return True

    def delete(self, username: str) -> bool:
        """Remove a user and everything it owns.

        Reserved accounts and unknown usernames are refused.
        """
        if ReservedAccount.is_reserved(username):
            return False
        user = self.get(username)
        if user is None:
            return False
        self._users.remove(user)
        if self._current_user is user:
            self._current_user = None
        logger.info(f"Deleted user '{username}'")
        self.save()
        return True

    def get(self, username: str) -> User | None:
        for user in self._users:
            if user.username == username:
                return user
        return None

    def get_all(self) -> list[User]:
        """All users in creation order (a copy of the internal list)."""
        return list(self._users)

    # --- Session ---

    def login(self, username: str) -> bool:
        user = self.get(username)
        if user is None:
            return False
        self._current_user = user
        logger.debug(f"Logged in as '{username}'")
        return True

    def logout(self) -> None:
        """Save and end the current session, if any."""
        if self._current_user is None:
            return
        self.save()
        logger.debug(f"Logged out '{self._current_user.username}'")
        self._current_user = None

    def is_current_admin(self) -> bool:
        return (
            self._current_user is not None
            and self._current_user.username == ReservedAccount.ADMIN.value
        )

    # --- Photo index ---

    def resolve_photo(self, file_path: str) -> Photo | None:
        """The canonical Photo for a file path, if any album holds it."""
        return self._photo_index.get(file_path)

    def register_photo(self, photo: Photo) -> Photo:
        """Return the canonical Photo for ``photo``'s path.

        The given instance becomes canonical when its path is new.
        """
        return self._photo_index.setdefault(photo.file_path, photo)

    # --- Persistence ---

    def save(self) -> bool:
        """Write the complete user list to the snapshot file."""
        self._rebuild_index()
        try:
            self._snapshot.write(self._users)
        except SnapshotError as e:
            logger.error(f"Could not save users: {e}")
            return False
        return True

    # --- Private helpers ---

    def _initialize(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._users = self._load()
        self._rebuild_index()

        if not self.exists(ReservedAccount.ADMIN.value):
            self.create(ReservedAccount.ADMIN.value)
        if not self.exists(ReservedAccount.STOCK.value):
            self.create(ReservedAccount.STOCK.value)
            self._seed_stock_user()

    def _load(self) -> list[User]:
        try:
            return self._snapshot.read()
        except SnapshotError as e:
            logger.error(f"Discarding unreadable snapshot: {e}")
            return []

    def _seed_stock_user(self) -> None:
        """Give the stock account its default album of bundled photos."""
        stock_user = self.get(ReservedAccount.STOCK.value)
        if stock_user is None or stock_user.albums:
            return

        album = Album(self._config.get("stock.album_name", "stock"))
        stock_user.add_album(album)
        for file_path in self._config.get("stock.files", []):
            if not os.path.isfile(file_path):
                logger.debug(f"Stock photo not found, skipping: {file_path}")
                continue
            photo = self.register_photo(photo_from_file(file_path))
            album.add_photo(photo)

        logger.info(
            f"Seeded stock album '{album.name}' with {album.photo_count} photos"
        )
        self.save()

    def _rebuild_index(self) -> None:
        index: dict[str, Photo] = {}
        for user in self._users:
            for album in user.albums:
                for photo in album.photos:
                    index.setdefault(photo.file_path, photo)
        self._photo_index = index
