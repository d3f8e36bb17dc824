"""
Photo Albums - user, album and photo organizer

Keeps each user's albums of tagged, captioned photos in a single snapshot
file and supports date-range and tag searches across them.
"""

__version__ = "0.1.0"

from .db.models import Album, Photo, User
from .store.user_store import ReservedAccount, UserStore
from .store.library import ActionResult, PhotoLibrary

__all__ = [
    'Album',
    'Photo',
    'User',
    'ReservedAccount',
    'UserStore',
    'ActionResult',
    'PhotoLibrary',
]
