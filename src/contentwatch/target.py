"""Observable targets for content watching.

A Target is anything whose content can be fetched as bytes on demand. It
also declares whether a failed fetch should be reported as a change
(fail-open) or not (fail-closed).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from contentwatch.logging import TRACE, get_logger

log = get_logger("target")


class FetchError(Exception):
    """Raised when a target cannot produce its content."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class Target(ABC):
    """Something whose content can be observed for change."""

    @abstractmethod
    def fail_open(self) -> bool:
        """Return True if fetch errors should be treated as a change."""

    @abstractmethod
    def content(self) -> bytes:
        """Return the current content.

        Raises:
            FetchError: If the content could not be fetched.
        """


class FileTarget(Target):
    """Target backed by the full contents of a file.

    Example:
        target = FileTarget("settings.yaml", fail_open=True)
        data = target.content()
    """

    def __init__(self, path: str | Path, fail_open: bool = True) -> None:
        """Initialize the file target.

        Args:
            path: File to read on every fetch.
            fail_open: Treat an unreadable file as a change (default True).
        """
        self._path = Path(path)
        self._fail_open = fail_open

    @property
    def path(self) -> Path:
        """Get the watched file path."""
        return self._path

    def fail_open(self) -> bool:
        return self._fail_open

    def content(self) -> bytes:
        try:
            return self._path.read_bytes()
        except OSError as e:
            log.log(TRACE, "Read failed for %s: %s", self._path, e)
            raise FetchError(f"Unable to read file {self._path}: {e}", cause=e) from e

    def __repr__(self) -> str:
        return f"FileTarget({str(self._path)!r}, fail_open={self._fail_open})"


class MemoryTarget(Target):
    """In-memory target whose content is set by the owner.

    Useful for embedding and tests: ``set()`` replaces the content,
    ``fail()`` makes subsequent fetches raise until the next ``set()``.
    """

    def __init__(self, data: bytes = b"", fail_open: bool = True) -> None:
        self._data = data
        self._fail_open = fail_open
        self._error: BaseException | None = None
        self.fetch_count = 0

    def set(self, data: bytes) -> None:
        """Replace the content and clear any injected failure."""
        self._data = data
        self._error = None

    def fail(self, error: BaseException | None = None) -> None:
        """Make subsequent fetches fail with ``error``."""
        self._error = error or OSError("content unavailable")

    def fail_open(self) -> bool:
        return self._fail_open

    def content(self) -> bytes:
        self.fetch_count += 1
        if self._error is not None:
            raise FetchError(f"Unable to get content: {self._error}", cause=self._error)
        return self._data
