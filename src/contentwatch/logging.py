"""Logging for contentwatch.

All modules log under the ``contentwatch`` logger via ``get_logger()``.
``setup_logging()`` attaches a single handler: a file when one is configured
(``LoggingConfig.file`` or ``CONTENTWATCH_LOG``), otherwise stderr when it is
a terminal. Verbosity 0-4 maps to error, warning, info, verbose, trace.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contentwatch.config.schema import LoggingConfig

TRACE = 5  # per-fetch detail
VERBOSE = 15  # detected changes

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("contentwatch")

# Indexed by verbosity, clamped to the ends
_VERBOSITY = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_initialized = False


def resolve_level(config: LoggingConfig | None) -> int:
    """Pick the log level for a config: verbose wins over level."""
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        return _VERBOSITY[min(max(config.verbose, 0), len(_VERBOSITY) - 1)]
    if config.level:
        # getLevelName maps registered names (including TRACE/VERBOSE) to ints
        level = logging.getLevelName(config.level.upper())
        if isinstance(level, int):
            return level
    return logging.INFO


def _make_handler(config: LoggingConfig | None) -> logging.Handler | None:
    log_path = (config.file if config else None) or os.environ.get("CONTENTWATCH_LOG")
    if log_path:
        try:
            return logging.FileHandler(os.path.expanduser(log_path), encoding="utf-8")
        except OSError as e:
            if not sys.stderr.isatty():
                return None
            print(f"[contentwatch] Failed to open log file: {e}", file=sys.stderr)
    if sys.stderr.isatty():
        return logging.StreamHandler(sys.stderr)
    return None


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the package logger once; later calls are no-ops."""
    global _initialized
    if _initialized:
        return
    _initialized = True

    logger.setLevel(resolve_level(config))
    handler = _make_handler(config)
    if handler is not None:
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)


def reset_logging() -> None:
    """Remove installed handlers so setup_logging() can run again."""
    global _initialized
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _initialized = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the package logger, or a child such as ``get_logger("watcher")``."""
    return logger.getChild(name) if name else logger
