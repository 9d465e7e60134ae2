"""Tests for configuration loading and logging setup."""

import logging

import pytest

from settings import (
    ConfigError,
    check_key,
    find_config_file,
    get_config,
    load_config,
    reload_config,
    setup_logging,
)


class TestLoadConfig:
    def test_defaults(self, home_dir):
        config = load_config()

        assert config.home_path == home_dir
        assert config.extensions_path == home_dir / "extensions"
        assert config.update_cache_path == home_dir / "update-check.json"
        assert config.update_cache_ttl_ms == 24 * 60 * 60 * 1000
        assert config.extensions.install_command == ["npm", "install"]
        assert config.updates.package_name == "@codeinspector/cli"
        assert config.dev.poll_interval == 0.5

    def test_update_check_disabled_by_environment(self):
        assert load_config().updates.enabled is False

    def test_update_check_enabled_without_flag(self, monkeypatch):
        monkeypatch.delenv("CODEINSPECTOR_NO_UPDATE_CHECK")

        assert load_config().updates.enabled is True

    def test_project_file_in_parent_directory(self, work_dir, monkeypatch):
        (work_dir / "codeinspector.toml").write_text(
            '[extensions]\nworkspace_dir = "plugins"\n\n[updates]\ntimeout = 2.5\n',
            encoding="utf-8",
        )
        nested = work_dir / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        config = load_config()

        assert find_config_file() == work_dir / "codeinspector.toml"
        assert config.extensions.workspace_dir == "plugins"
        assert config.updates.timeout == 2.5

    def test_home_config_file(self, home_dir):
        home_dir.mkdir()
        (home_dir / "config.toml").write_text('[general]\nlog_level = "DEBUG"\n', encoding="utf-8")

        assert find_config_file() == home_dir / "config.toml"
        assert load_config().general.log_level == "DEBUG"

    def test_explicit_config_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text('[forge]\napi_url = "https://ghe.example.com/api/v3"\n', encoding="utf-8")
        monkeypatch.setenv("CODEINSPECTOR_CONFIG", str(path))

        assert load_config().forge.api_url == "https://ghe.example.com/api/v3"

    def test_environment_overrides_file(self, work_dir, monkeypatch, tmp_path):
        (work_dir / "codeinspector.toml").write_text(
            '[updates]\nregistry_url = "https://from-file"\n', encoding="utf-8"
        )
        monkeypatch.setenv("NPM_REGISTRY_URL", "https://from-env")
        monkeypatch.setenv("GITHUB_TOKEN", "tok")
        monkeypatch.setenv("CODEINSPECTOR_EXTENSIONS_DIR", str(tmp_path / "exts"))

        config = load_config()

        assert config.updates.registry_url == "https://from-env"
        assert config.forge.token == "tok"
        assert config.extensions_path == tmp_path / "exts"

    def test_get_config_is_cached_until_reload(self, monkeypatch):
        first = get_config()
        assert get_config() is first

        monkeypatch.setenv("GITHUB_TOKEN", "new")
        assert reload_config().forge.token == "new"
        assert get_config() is not first

    def test_unknown_key_is_rejected(self, work_dir):
        (work_dir / "codeinspector.toml").write_text("[updates]\ntypo = 1\n", encoding="utf-8")

        with pytest.raises(ConfigError, match=r"Unknown key in \[updates\]: typo"):
            load_config()

    def test_unknown_key_is_rejected_despite_env_override(self, work_dir, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "tok")
        (work_dir / "codeinspector.toml").write_text('[forge]\ntokn = "x"\n', encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config()

    def test_malformed_toml(self, work_dir):
        (work_dir / "codeinspector.toml").write_text("[updates\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config()

    def test_section_must_be_table(self, work_dir):
        (work_dir / "codeinspector.toml").write_text("updates = 1\n", encoding="utf-8")

        with pytest.raises(ConfigError, match=r"\[updates\] must be a table"):
            load_config()


class TestCheckKey:
    def test_known_key(self):
        check_key("updates", "timeout")

    def test_unknown_section(self):
        with pytest.raises(ConfigError, match="Unknown section: nope"):
            check_key("nope", "timeout")

    def test_unknown_key_lists_available(self):
        with pytest.raises(ConfigError, match="available: api_url, token"):
            check_key("forge", "tokn")


class TestSetupLogging:
    def test_installs_single_rich_handler(self):
        from rich.logging import RichHandler

        setup_logging("INFO")
        setup_logging("DEBUG")

        root = logging.getLogger()
        handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

        setup_logging("WARNING")
