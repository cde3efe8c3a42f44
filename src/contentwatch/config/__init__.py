"""Configuration management for contentwatch.

Hierarchical YAML configuration with:
- System-level config (/etc/contentwatch/ or %PROGRAMDATA%)
- User-level config (~/.config/contentwatch/ or %APPDATA%)
- An explicit config file
- Environment variable overrides (highest priority)

Example usage:
    from contentwatch.config import load_config

    config = load_config("watch.yaml")
    print(config.watch.interval)
"""

from contentwatch.config.loader import load_config
from contentwatch.config.paths import (
    get_config_paths,
    get_system_config_path,
    get_user_config_path,
)
from contentwatch.config.schema import Config, LoggingConfig, WatchConfig

__all__ = [
    "Config",
    "LoggingConfig",
    "WatchConfig",
    "load_config",
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
]
