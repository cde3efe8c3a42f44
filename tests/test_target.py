"""Tests for observable targets."""

from __future__ import annotations

from pathlib import Path

import pytest

from contentwatch.target import FetchError, FileTarget, MemoryTarget, Target


class TestFileTarget:
    """Test the file-backed target."""

    def test_reads_full_content(self, tmp_path: Path) -> None:
        """content() returns the file bytes unchanged."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"\x00line one\nline two\xff")

        assert FileTarget(path).content() == b"\x00line one\nline two\xff"

    def test_rereads_on_every_call(self, tmp_path: Path) -> None:
        path = tmp_path / "data.txt"
        path.write_text("first")
        target = FileTarget(path)

        assert target.content() == b"first"
        path.write_text("second")
        assert target.content() == b"second"

    def test_missing_file_raises_fetch_error(self, tmp_path: Path) -> None:
        """A missing file raises FetchError wrapping the OS error."""
        target = FileTarget(tmp_path / "missing.txt")

        with pytest.raises(FetchError) as exc_info:
            target.content()

        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert "missing.txt" in str(exc_info.value)

    def test_directory_raises_fetch_error(self, tmp_path: Path) -> None:
        with pytest.raises(FetchError):
            FileTarget(tmp_path).content()

    def test_fail_open_default(self, tmp_path: Path) -> None:
        """File targets are fail-open unless told otherwise."""
        assert FileTarget(tmp_path / "a").fail_open() is True
        assert FileTarget(tmp_path / "a", fail_open=False).fail_open() is False

    def test_path_accepts_str(self, tmp_path: Path) -> None:
        target = FileTarget(str(tmp_path / "a.txt"))
        assert target.path == tmp_path / "a.txt"
        assert "a.txt" in repr(target)


class TestMemoryTarget:
    """Test the in-memory target."""

    def test_set_and_fail(self) -> None:
        target = MemoryTarget(b"one")
        assert target.content() == b"one"

        target.fail(PermissionError("denied"))
        with pytest.raises(FetchError) as exc_info:
            target.content()
        assert isinstance(exc_info.value.cause, PermissionError)

        target.set(b"two")
        assert target.content() == b"two"
        assert target.fetch_count == 3

    def test_is_a_target(self) -> None:
        assert isinstance(MemoryTarget(), Target)


class TestTargetContract:
    """Test the abstract base."""

    def test_cannot_instantiate_incomplete_target(self) -> None:
        class OnlyContent(Target):
            def content(self) -> bytes:
                return b""

        with pytest.raises(TypeError):
            OnlyContent()  # type: ignore[abstract]
