"""Tests for snapshot persistence."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine, text

from photo_albums.db.models import Album, Photo, User
from photo_albums.db.snapshot import SnapshotError, SnapshotFile


@pytest.fixture
def snapshot(tmp_path):
    return SnapshotFile(tmp_path / "data" / "users.db")


def sample_users():
    shared = Photo(
        file_path="/photos/shared.jpg",
        date_time=datetime(2021, 6, 1, 9, 15, 30, 250),
        caption="Sunrise",
    )
    shared.add_tag("location", "Lisbon")
    shared.add_tag("person", "alice")
    other = Photo("/photos/other.png", datetime(2020, 1, 2, 3, 4, 5))
    return [
        User("admin"),
        User("alice", [
            Album("Trip", [shared, other, shared]),
            Album("Best", [shared]),
            Album("Empty"),
        ]),
        User("bob", [Album("Mine", [other])]),
    ]


def tamper(path, statement):
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.execute(text(statement))
    engine.dispose()


def graph(users):
    """Plain-data view of a user list for comparisons."""
    return [
        (
            user.username,
            [
                (
                    album.name,
                    [
                        (p.file_path, p.caption, p.date_time, list(p.tags.items()))
                        for p in album.photos
                    ],
                )
                for album in user.albums
            ],
        )
        for user in users
    ]


class TestSnapshotFile:
    def test_missing_file_reads_empty(self, snapshot):
        assert not snapshot.exists()
        assert snapshot.read() == []

    def test_empty_file_reads_empty(self, snapshot):
        snapshot.path.parent.mkdir(parents=True)
        snapshot.path.write_bytes(b"")
        assert not snapshot.exists()
        assert snapshot.read() == []

    def test_round_trip(self, snapshot):
        users = sample_users()
        snapshot.write(users)
        assert snapshot.exists()

        loaded = snapshot.read()
        assert graph(loaded) == graph(users)

    def test_shared_photo_stays_shared(self, snapshot):
        snapshot.write(sample_users())
        alice = snapshot.read()[1]
        trip, best = alice.albums[0], alice.albums[1]
        assert trip.photos[0] is trip.photos[2]
        assert trip.photos[0] is best.photos[0]

    def test_photo_shared_between_users(self, snapshot):
        snapshot.write(sample_users())
        _, alice, bob = snapshot.read()
        assert alice.albums[0].photos[1] is bob.albums[0].photos[0]

    def test_write_replaces_previous_snapshot(self, snapshot):
        snapshot.write(sample_users())
        snapshot.write([User("only")])
        assert [u.username for u in snapshot.read()] == ["only"]

    def test_no_temp_files_left_behind(self, snapshot):
        snapshot.write(sample_users())
        snapshot.write(sample_users())
        assert [p.name for p in snapshot.path.parent.iterdir()] == ["users.db"]

    def test_garbage_file_raises(self, snapshot):
        snapshot.path.parent.mkdir(parents=True)
        snapshot.path.write_bytes(b"this is not a snapshot" * 50)
        with pytest.raises(SnapshotError):
            snapshot.read()

    def test_write_failure_raises_and_keeps_old_snapshot(self, tmp_path):
        # A directory where the file should be makes the final rename fail
        target = tmp_path / "users.db"
        target.mkdir()
        (target / "keep").write_text("x")
        with pytest.raises(SnapshotError):
            SnapshotFile(target).write(sample_users())
        assert (target / "keep").exists()
        assert [p.name for p in tmp_path.iterdir()] == ["users.db"]

    def test_bad_stored_date_raises(self, snapshot):
        snapshot.write(sample_users())
        tamper(snapshot.path, "UPDATE photos SET date_time = 'garbage'")
        with pytest.raises(SnapshotError):
            snapshot.read()

    def test_album_entry_without_photo_raises(self, snapshot):
        snapshot.write(sample_users())
        tamper(snapshot.path, "DELETE FROM photos")
        with pytest.raises(SnapshotError):
            snapshot.read()

    def test_unknown_format_version_raises(self, snapshot):
        snapshot.write(sample_users())
        tamper(snapshot.path, "UPDATE snapshot_info SET value = '99' WHERE key = 'format_version'")
        with pytest.raises(SnapshotError, match="Unsupported snapshot format"):
            snapshot.read()
