"""Configuration and logging for the CodeInspector CLI."""

from settings.config import (
    Config,
    ConfigError,
    check_key,
    default_home,
    find_config_file,
    get_config,
    load_config,
    reload_config,
)
from settings.log import setup_logging

__all__ = [
    "Config",
    "ConfigError",
    "check_key",
    "default_home",
    "find_config_file",
    "get_config",
    "load_config",
    "reload_config",
    "setup_logging",
]
