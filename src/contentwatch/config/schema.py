"""Configuration schema dataclasses for contentwatch.

All fields have defaults so partial configs merge together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Shortest accepted polling interval in seconds
MIN_INTERVAL = 0.01


@dataclass
class WatchConfig:
    """Watch defaults used by the command-line driver.

    Example config.yaml:
        watch:
          interval: 0.5
          duration: 30
          fail_open: false
    """

    interval: float = 1.0  # Seconds between checks
    duration: float = 10.0  # Seconds the demo runs before stopping
    fail_open: bool = True  # Treat unreadable targets as changed


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Unrecognised top-level sections
    extra: dict[str, Any] = field(default_factory=dict)
