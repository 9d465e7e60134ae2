"""Configuration management for the CodeInspector CLI.

Loads configuration from:
1. codeinspector.toml / ~/.codeinspector/config.toml (defaults)
2. Environment variables (overrides)
"""

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

CONFIG_FILENAME = "codeinspector.toml"
DEFAULT_HOME = Path.home() / ".codeinspector"


class ConfigError(Exception):
    """Raised when the config file cannot be parsed or names unknown keys."""

    pass


@dataclass
class GeneralConfig:
    """General CLI settings."""

    home_dir: str = ""  # empty = ~/.codeinspector
    log_level: str = "WARNING"


@dataclass
class ExtensionsConfig:
    """Where extensions are created and installed."""

    # Per-user install root (default: <home>/extensions)
    extensions_dir: str = ""

    # Workspace folder used by `create` and `list`, relative to the cwd
    workspace_dir: str = "extensions"

    # Command run in an extension folder that ships a package.json
    install_command: list[str] = field(default_factory=lambda: ["npm", "install"])


@dataclass
class UpdatesConfig:
    """Self-update check against the npm registry."""

    enabled: bool = True
    registry_url: str = "https://registry.npmjs.org"
    package_name: str = "@codeinspector/cli"
    timeout: float = 5.0  # seconds
    cache_ttl_hours: int = 24


@dataclass
class ForgeConfig:
    """Hosted forge (GitHub) used for release publishing."""

    api_url: str = "https://api.github.com"
    token: str = ""  # also configurable via env: GITHUB_TOKEN


@dataclass
class DevConfig:
    """Development-mode file watching."""

    poll_interval: float = 0.5
    watch_suffixes: list[str] = field(default_factory=lambda: [".js", ".ts"])


# TOML table name -> section dataclass
SECTIONS = {
    "general": GeneralConfig,
    "extensions": ExtensionsConfig,
    "updates": UpdatesConfig,
    "forge": ForgeConfig,
    "dev": DevConfig,
}


@dataclass
class Config:
    """Main configuration container."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    extensions: ExtensionsConfig = field(default_factory=ExtensionsConfig)
    updates: UpdatesConfig = field(default_factory=UpdatesConfig)
    forge: ForgeConfig = field(default_factory=ForgeConfig)
    dev: DevConfig = field(default_factory=DevConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary.

        Raises:
            ConfigError: If a section is not a table or holds an unknown key.
        """
        sections = {}
        for name in SECTIONS:
            values = data.get(name, {})
            if not isinstance(values, dict):
                raise ConfigError(f"[{name}] must be a table")
            for key in values:
                check_key(name, key)
            sections[name] = SECTIONS[name](**values)
        return cls(**sections)

    @property
    def home_path(self) -> Path:
        """Per-user configuration directory."""
        if self.general.home_dir:
            return Path(self.general.home_dir).expanduser()
        return DEFAULT_HOME

    @property
    def extensions_path(self) -> Path:
        """Per-user extension install root."""
        if self.extensions.extensions_dir:
            return Path(self.extensions.extensions_dir).expanduser()
        return self.home_path / "extensions"

    @property
    def update_cache_path(self) -> Path:
        """Location of the cached update-check record."""
        return self.home_path / "update-check.json"

    @property
    def update_cache_ttl_ms(self) -> int:
        return self.updates.cache_ttl_hours * 60 * 60 * 1000


def find_config_file() -> Path | None:
    """Find the configuration file.

    Checks $CODEINSPECTOR_CONFIG, then codeinspector.toml in the current or
    parent directories, then <home>/config.toml.

    Returns:
        Path to the config file or None if not found.
    """
    explicit = os.getenv("CODEINSPECTOR_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    current = Path.cwd()

    for directory in [current, *current.parents]:
        config_path = directory / CONFIG_FILENAME
        if config_path.exists():
            return config_path

    user_config = default_home() / "config.toml"
    if user_config.exists():
        return user_config

    return None


def default_home() -> Path:
    """Home directory from $CODEINSPECTOR_HOME, without reading any file."""
    home = os.getenv("CODEINSPECTOR_HOME")
    return Path(home).expanduser() if home else DEFAULT_HOME


def check_key(section: str, key: str) -> None:
    """Reject a setting that no config section defines.

    Raises:
        ConfigError: If the section or the key is unknown.
    """
    if section not in SECTIONS:
        raise ConfigError(f"Unknown section: {section} (available: {', '.join(SECTIONS)})")
    known = [f.name for f in fields(SECTIONS[section])]
    if key not in known:
        raise ConfigError(f"Unknown key in [{section}]: {key} (available: {', '.join(known)})")


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Optional explicit path to the config file

    Returns:
        Config object with merged settings.

    Raises:
        ConfigError: If the config file is not valid TOML or holds an
            unknown key.
    """
    # Start with defaults
    config_data: dict[str, Any] = {}

    # Load from file if available
    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, "rb") as f:
                    config_data = tomllib.load(f)
                # Checked before env overrides are merged in
                Config.from_dict(config_data)
            except (tomllib.TOMLDecodeError, ConfigError) as e:
                raise ConfigError(f"Invalid config file {path}: {e}")

    # Apply environment variable overrides
    env_overrides = {
        "general": {
            "home_dir": os.getenv("CODEINSPECTOR_HOME"),
            "log_level": os.getenv("CODEINSPECTOR_LOG_LEVEL"),
        },
        "extensions": {
            "extensions_dir": os.getenv("CODEINSPECTOR_EXTENSIONS_DIR"),
        },
        "updates": {
            "registry_url": os.getenv("NPM_REGISTRY_URL"),
            "enabled": False if _truthy(os.getenv("CODEINSPECTOR_NO_UPDATE_CHECK")) else None,
        },
        "forge": {
            "token": os.getenv("GITHUB_TOKEN"),
        },
    }

    # Merge env overrides (only non-None values)
    for section, values in env_overrides.items():
        if section not in config_data:
            config_data[section] = {}
        for key, value in values.items():
            if value is not None:
                config_data[section][key] = value

    return Config.from_dict(config_data)


def _truthy(value: str | None) -> bool:
    """Interpret an environment flag."""
    if value is None:
        return False
    return value.strip().lower() in ("1", "true", "yes", "on")


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config object (loaded once, cached).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Force reload of configuration.

    Returns:
        Fresh Config object.
    """
    global _config
    _config = load_config()
    return _config
