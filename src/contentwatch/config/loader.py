"""Configuration file loading.

Handles:
- YAML file parsing
- Environment variable overrides
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from contentwatch.config.merge import merge_configs
from contentwatch.config.paths import get_config_paths
from contentwatch.config.schema import MIN_INTERVAL, Config, LoggingConfig, WatchConfig

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("contentwatch.config")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML as dict, or empty dict on error.
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def parse_bool(value: Any) -> bool | None:
    """Parse a config boolean, returning None if unrecognised."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


def env_overrides() -> dict[str, Any]:
    """Build config dict from CONTENTWATCH_* environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("CONTENTWATCH_LOG")
    log_level = os.environ.get("CONTENTWATCH_LOG_LEVEL")
    if log_path or log_level:
        overrides["logging"] = {"file": log_path, "level": log_level}

    watch: dict[str, Any] = {}
    interval = os.environ.get("CONTENTWATCH_INTERVAL")
    if interval:
        watch["interval"] = interval

    fail_open = os.environ.get("CONTENTWATCH_FAIL_OPEN")
    if fail_open:
        parsed = parse_bool(fail_open)
        if parsed is None:
            _log.warning("Ignoring CONTENTWATCH_FAIL_OPEN=%r", fail_open)
        else:
            watch["fail_open"] = parsed

    if watch:
        overrides["watch"] = watch

    return overrides


def _float_option(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        _log.warning("Invalid watch.%s %r, using %s", key, value, default)
        return default


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    defaults = WatchConfig()

    watch_data = data.get("watch") or {}
    fail_open = parse_bool(watch_data.get("fail_open", defaults.fail_open))
    if fail_open is None:
        _log.warning("Invalid watch.fail_open %r, using default", watch_data.get("fail_open"))
        fail_open = defaults.fail_open

    watch = WatchConfig(
        interval=max(MIN_INTERVAL, _float_option(watch_data, "interval", defaults.interval)),
        duration=max(0.0, _float_option(watch_data, "duration", defaults.duration)),
        fail_open=fail_open,
    )

    log_data = data.get("logging") or {}
    verbose = log_data.get("verbose")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=verbose if isinstance(verbose, int) else None,
        file=log_data.get("file"),
    )

    known_keys = {"watch", "logging"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(watch=watch, logging=logging_config, extra=extra)


def load_config(config_file: str | Path | None = None) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Explicit config file
    3. User config
    4. System config

    Args:
        config_file: Optional explicit config file path.

    Returns:
        Merged Config object.
    """
    configs: list[dict[str, Any]] = []

    for path in get_config_paths(config_file):
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    env_config = env_overrides()
    if env_config:
        configs.append(env_config)

    return dict_to_config(merge_configs(*configs))
