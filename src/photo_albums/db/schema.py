"""
Snapshot schema for the photo albums data file.
Defines the tables for users, albums, photos, tags and album membership.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# Bumped whenever the table layout changes; snapshots with another
# version are not loaded.
SNAPSHOT_FORMAT_VERSION = 1


class UserRow(Base):
    """One user account, in store order."""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    username = Column(String(255), nullable=False, unique=True)
    position = Column(Integer, nullable=False, index=True)

    albums = relationship(
        "AlbumRow", back_populates="user",
        cascade="all, delete-orphan", order_by="AlbumRow.position",
    )

    def __repr__(self):
        return f"<UserRow(id={self.id}, username='{self.username}')>"


class AlbumRow(Base):
    """An album belonging to one user, in the user's album order."""
    __tablename__ = 'albums'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    position = Column(Integer, nullable=False)

    user = relationship("UserRow", back_populates="albums")
    entries = relationship(
        "AlbumPhotoRow", back_populates="album",
        cascade="all, delete-orphan", order_by="AlbumPhotoRow.position",
    )

    def __repr__(self):
        return f"<AlbumRow(id={self.id}, name='{self.name}')>"


class PhotoRow(Base):
    """A photo, stored once per file path and shared by every album holding it."""
    __tablename__ = 'photos'

    id = Column(Integer, primary_key=True)
    file_path = Column(String(4096), nullable=False, unique=True, index=True)
    caption = Column(Text, nullable=False, default="")
    date_time = Column(DateTime, nullable=False)

    tags = relationship(
        "PhotoTagRow", back_populates="photo",
        cascade="all, delete-orphan", order_by="PhotoTagRow.position",
    )

    def __repr__(self):
        return f"<PhotoRow(id={self.id}, file_path='{self.file_path}')>"


class PhotoTagRow(Base):
    """A (type, value) tag on a photo."""
    __tablename__ = 'photo_tags'
    __table_args__ = (UniqueConstraint('photo_id', 'tag_type'),)

    id = Column(Integer, primary_key=True)
    photo_id = Column(Integer, ForeignKey('photos.id'), nullable=False, index=True)
    tag_type = Column(String(255), nullable=False)
    tag_value = Column(Text, nullable=False)
    position = Column(Integer, nullable=False)

    photo = relationship("PhotoRow", back_populates="tags")

    def __repr__(self):
        return f"<PhotoTagRow(photo_id={self.photo_id}, {self.tag_type}={self.tag_value})>"


class AlbumPhotoRow(Base):
    """Ordered album membership. The same photo may appear more than once."""
    __tablename__ = 'album_photos'

    id = Column(Integer, primary_key=True)
    album_id = Column(Integer, ForeignKey('albums.id'), nullable=False, index=True)
    photo_id = Column(Integer, ForeignKey('photos.id'), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    album = relationship("AlbumRow", back_populates="entries")
    photo = relationship("PhotoRow")

    def __repr__(self):
        return f"<AlbumPhotoRow(album_id={self.album_id}, photo_id={self.photo_id})>"


class SnapshotInfo(Base):
    """Key/value facts about the snapshot itself."""
    __tablename__ = 'snapshot_info'

    key = Column(String(64), primary_key=True)
    value = Column(Text)
