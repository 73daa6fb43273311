"""Tests for settings module."""

import json
from unittest.mock import patch

from cloudship.settings import ProjectConfig, Settings, get_settings, load_project_config


class TestSettings:
    """Test Settings class configuration."""

    def test_settings_defaults(self):
        """Settings has correct default values."""
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.max_instances == 10
            assert settings.instance_type == "basic"
            assert settings.compatibility_flag == "nodejs_compat"
            assert settings.default_port == 8080
            assert settings.package_manager == "npm"

    def test_settings_loads_from_env(self):
        """Settings reads CLOUDSHIP_ prefixed variables."""
        with patch.dict(
            "os.environ",
            {"CLOUDSHIP_MAX_INSTANCES": "3", "CLOUDSHIP_PACKAGE_MANAGER": "pnpm"},
            clear=True,
        ):
            settings = Settings(_env_file=None)
            assert settings.max_instances == 3
            assert settings.package_manager == "pnpm"


class TestGetSettings:
    """Test get_settings caching."""

    def test_get_settings_returns_same_instance(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestLoadProjectConfig:
    """Test per-project config file loading."""

    def test_no_config_file(self, tmp_path):
        """Missing config yields empty defaults."""
        config = load_project_config(tmp_path)
        assert config == ProjectConfig()

    def test_reads_aliased_keys(self, tmp_path):
        """Config keys use the file's camelCase names."""
        (tmp_path / "cf.config.json").write_text(
            json.dumps(
                {
                    "type": "container",
                    "name": "shop",
                    "class": "ShopContainer",
                    "maxInstances": 4,
                    "migrationTag": "v7",
                    "unrelated": True,
                }
            )
        )

        config = load_project_config(tmp_path)

        assert config.type_id == "container"
        assert config.name == "shop"
        assert config.class_name == "ShopContainer"
        assert config.max_instances == 4
        assert config.migration_tag == "v7"

    def test_first_file_wins(self, tmp_path):
        (tmp_path / "cf.config.json").write_text('{"name": "first"}')
        (tmp_path / ".cfrc.json").write_text('{"name": "second"}')

        assert load_project_config(tmp_path).name == "first"

    def test_falls_back_to_rc_file(self, tmp_path):
        (tmp_path / ".cfrc.json").write_text('{"name": "rc"}')

        assert load_project_config(tmp_path).name == "rc"

    def test_malformed_file_is_skipped(self, tmp_path, caplog):
        """A broken config file logs a warning and is ignored."""
        (tmp_path / "cf.config.json").write_text("{not json")
        (tmp_path / ".cfrc.json").write_text('{"name": "rc"}')

        config = load_project_config(tmp_path)

        assert config.name == "rc"
        assert "Failed to load config from cf.config.json" in caplog.text
