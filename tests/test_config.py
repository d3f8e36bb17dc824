"""Tests for ConfigManager."""

from pathlib import Path

import pytest

from photo_albums.config.config import ConfigManager


class TestConfigManager:
    def test_default_config(self):
        cm = ConfigManager()
        assert cm.get("storage.data_dir") == "data"
        assert cm.get("storage.snapshot_file") == "users.db"
        assert cm.get("stock.album_name") == "stock"
        assert "jpg" in cm.get("library.photo_formats")

    def test_snapshot_path(self):
        cm = ConfigManager()
        assert cm.snapshot_path() == Path("data") / "users.db"
        cm.set("storage.data_dir", "/var/albums")
        assert cm.snapshot_path() == Path("/var/albums/users.db")

    def test_snapshot_path_data_dir_override(self):
        cm = ConfigManager()
        cm.set("storage.data_dir", "/var/albums")
        cm.set("storage.snapshot_file", "albums.db")
        assert cm.snapshot_path("/tmp/elsewhere") == Path("/tmp/elsewhere/albums.db")

    def test_get_dotted_key(self):
        cm = ConfigManager()
        assert cm.get("logging.level") == "INFO"
        assert cm.get("nonexistent.key") is None
        assert cm.get("nonexistent.key", "fallback") == "fallback"

    def test_set_creates_nested_keys(self):
        cm = ConfigManager()
        cm.set("new.nested.key", "value")
        assert cm.get("new.nested.key") == "value"

    def test_save_and_load(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        cm = ConfigManager()
        cm.set("stock.album_name", "samples")
        cm.save(config_path)

        cm2 = ConfigManager(config_path)
        assert cm2.get("stock.album_name") == "samples"
        # Defaults should still be present
        assert cm2.get("storage.snapshot_file") == "users.db"

    def test_load_merges_with_defaults(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("storage:\n  data_dir: elsewhere\n")

        cm = ConfigManager(config_path)
        assert cm.get("storage.data_dir") == "elsewhere"
        assert cm.get("storage.snapshot_file") == "users.db"

    def test_list_values_replaced_not_merged(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("stock:\n  files:\n    - one.jpg\n")

        cm = ConfigManager(config_path)
        assert cm.get("stock.files") == ["one.jpg"]

    def test_empty_file_gives_defaults(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")
        cm = ConfigManager(config_path)
        assert cm.get("storage.data_dir") == "data"

    def test_reset(self):
        cm = ConfigManager()
        cm.set("logging.level", "DEBUG")
        cm.reset()
        assert cm.get("logging.level") == "INFO"

    def test_no_path_raises(self):
        cm = ConfigManager()
        with pytest.raises(ValueError):
            cm.load()
        with pytest.raises(ValueError):
            cm.save()
