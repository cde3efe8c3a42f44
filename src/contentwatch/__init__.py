"""contentwatch: detect content changes by polling and fingerprint comparison."""

__version__ = "0.1.0"

# Public API
from contentwatch.config import Config, load_config
from contentwatch.fingerprint import fingerprint, fingerprints_match
from contentwatch.logging import get_logger, setup_logging
from contentwatch.target import FetchError, FileTarget, MemoryTarget, Target
from contentwatch.watcher import (
    DiffResult,
    IntervalState,
    Notifications,
    Watcher,
    file_watch,
)

__all__ = [
    # Watching
    "Watcher",
    "DiffResult",
    "Notifications",
    "IntervalState",
    "file_watch",
    # Targets
    "Target",
    "FileTarget",
    "MemoryTarget",
    "FetchError",
    # Fingerprints
    "fingerprint",
    "fingerprints_match",
    # Config and logging
    "Config",
    "load_config",
    "get_logger",
    "setup_logging",
]
