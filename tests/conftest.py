"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from contentwatch.logging import reset_logging
from contentwatch.target import MemoryTarget

pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def clean_logging():
    """Let each test call setup_logging() from scratch."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove CONTENTWATCH_* overrides from the environment."""
    for name in (
        "CONTENTWATCH_LOG",
        "CONTENTWATCH_LOG_LEVEL",
        "CONTENTWATCH_INTERVAL",
        "CONTENTWATCH_FAIL_OPEN",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def memory_target() -> MemoryTarget:
    """Fail-open in-memory target holding b"hello"."""
    return MemoryTarget(b"hello", fail_open=True)
