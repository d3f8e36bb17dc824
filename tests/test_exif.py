"""Tests for photo timestamps read from EXIF data."""

import os
from datetime import datetime

from PIL import Image

from photo_albums.scanner.exif import (
    ExifDates,
    _parse_exif_datetime,
    extract_exif_dates,
    photo_datetime,
    photo_from_file,
)

DATETIME_TAG = 0x0132
DATETIME_ORIGINAL_TAG = 0x9003
EXIF_IFD = 0x8769


def write_jpeg(path, ifd0=None, exif_ifd=None):
    img = Image.new("RGB", (16, 16), color=(10, 120, 60))
    exif = Image.Exif()
    for tag, value in (ifd0 or {}).items():
        exif[tag] = value
    if exif_ifd:
        sub_ifd = exif.get_ifd(EXIF_IFD)
        for tag, value in exif_ifd.items():
            sub_ifd[tag] = value
    img.save(path, exif=exif.tobytes())
    return path


class TestParseExifDatetime:
    def test_standard_format(self):
        assert _parse_exif_datetime("2019:07:04 15:30:24") == datetime(2019, 7, 4, 15, 30, 24)

    def test_dashed_format(self):
        assert _parse_exif_datetime("2019-07-04 15:30:24") == datetime(2019, 7, 4, 15, 30, 24)

    def test_date_only(self):
        assert _parse_exif_datetime("2019:07:04") == datetime(2019, 7, 4)

    def test_invalid(self):
        assert _parse_exif_datetime("0000:00:00 00:00:00") is None
        assert _parse_exif_datetime("") is None
        assert _parse_exif_datetime(None) is None
        assert _parse_exif_datetime(12345) is None


class TestExifDates:
    def test_best_prefers_original(self):
        dates = ExifDates(
            datetime_original=datetime(2018, 5, 6),
            datetime_digitized=datetime(2019, 1, 1),
            datetime_modified=datetime(2020, 1, 1),
        )
        assert dates.best == datetime(2018, 5, 6)

    def test_best_falls_back_in_order(self):
        assert ExifDates(datetime_modified=datetime(2020, 1, 1)).best == datetime(2020, 1, 1)
        assert ExifDates(
            datetime_digitized=datetime(2019, 1, 1),
            datetime_modified=datetime(2020, 1, 1),
        ).best == datetime(2019, 1, 1)
        assert ExifDates().best is None


class TestExtractExifDates:
    def test_datetime_from_ifd0(self, tmp_path):
        path = write_jpeg(tmp_path / "a.jpg", ifd0={DATETIME_TAG: "2019:07:04 15:30:24"})
        dates = extract_exif_dates(path)
        assert dates.datetime_modified == datetime(2019, 7, 4, 15, 30, 24)
        assert dates.best == datetime(2019, 7, 4, 15, 30, 24)

    def test_datetime_original_from_exif_ifd(self, tmp_path):
        path = write_jpeg(
            tmp_path / "a.jpg",
            ifd0={DATETIME_TAG: "2020:01:01 00:00:00"},
            exif_ifd={DATETIME_ORIGINAL_TAG: "2018:05:06 07:08:09"},
        )
        dates = extract_exif_dates(path)
        assert dates.datetime_original == datetime(2018, 5, 6, 7, 8, 9)
        assert dates.datetime_modified == datetime(2020, 1, 1)
        assert dates.best == datetime(2018, 5, 6, 7, 8, 9)

    def test_png_without_exif(self, tmp_path):
        path = tmp_path / "a.png"
        Image.new("RGB", (4, 4)).save(path)
        assert extract_exif_dates(path) == ExifDates()

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "fake.jpg"
        path.write_text("not an image")
        assert extract_exif_dates(path).best is None


class TestPhotoDatetime:
    def test_uses_exif(self, tmp_path):
        path = write_jpeg(tmp_path / "a.jpg", ifd0={DATETIME_TAG: "2019:07:04 15:30:24"})
        assert photo_datetime(path) == datetime(2019, 7, 4, 15, 30, 24)

    def test_falls_back_to_mtime(self, tmp_path):
        path = tmp_path / "a.png"
        Image.new("RGB", (4, 4)).save(path)
        stamp = datetime(2015, 3, 14, 9, 26, 53).timestamp()
        os.utime(path, (stamp, stamp))
        assert photo_datetime(path) == datetime(2015, 3, 14, 9, 26, 53)

    def test_missing_file_uses_now(self, tmp_path):
        before = datetime.now()
        taken = photo_datetime(tmp_path / "missing.jpg")
        assert before <= taken <= datetime.now()

    def test_photo_from_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        write_jpeg(tmp_path / "a.jpg", ifd0={DATETIME_TAG: "2019:07:04 15:30:24"})
        photo = photo_from_file("a.jpg")
        assert photo.file_path == str(tmp_path / "a.jpg")
        assert photo.date_time == datetime(2019, 7, 4, 15, 30, 24)
        assert photo.caption == ""
        assert photo.tags == {}
