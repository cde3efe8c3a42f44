"""Tests for manual polling with Watcher.updated()."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from contentwatch.fingerprint import fingerprint
from contentwatch.target import FetchError, MemoryTarget
from contentwatch.watcher import DiffResult, Watcher, file_watch


class TestDiff:
    """Test the fingerprint diff step shared by both modes."""

    def test_changed_returns_new_fingerprint(self, memory_target: MemoryTarget) -> None:
        watcher = Watcher(memory_target)

        result = watcher.diff(None)

        assert result == DiffResult(fingerprint(b"hello"), True, None)

    def test_unchanged_returns_token(self, memory_target: MemoryTarget) -> None:
        watcher = Watcher(memory_target)
        token = fingerprint(b"hello")

        result = watcher.diff(token)

        assert result.fingerprint is token
        assert result.changed is False
        assert result.error is None

    def test_error_keeps_token(self) -> None:
        """A failed fetch returns the caller's token and the fail-open flag."""
        target = MemoryTarget(fail_open=False)
        target.fail()
        token = fingerprint(b"old")

        result = Watcher(target).diff(token)

        assert result.fingerprint is token
        assert result.changed is False
        assert isinstance(result.error, FetchError)

    def test_short_token_is_different(self, memory_target: MemoryTarget) -> None:
        result = Watcher(memory_target).diff(b"")
        assert result.changed is True


class TestUpdated:
    """Test Watcher.updated()."""

    def test_first_call_reports_change(self, memory_target: MemoryTarget) -> None:
        """The first observation always counts as a change."""
        watcher = Watcher(memory_target)
        assert watcher.last_fingerprint is None

        assert watcher.updated() == (True, None)
        assert watcher.last_fingerprint == fingerprint(b"hello")

    def test_unchanged_content_is_idempotent(self, memory_target: MemoryTarget) -> None:
        watcher = Watcher(memory_target)
        watcher.updated()

        assert watcher.updated() == (False, None)
        assert watcher.updated() == (False, None)

    def test_empty_content_first_call(self) -> None:
        """Empty content still has a real fingerprint, so it counts as a change."""
        watcher = Watcher(MemoryTarget(b""))
        assert watcher.updated() == (True, None)
        assert watcher.updated() == (False, None)

    @pytest.mark.parametrize(
        ("contents", "expected"),
        [
            ([b"a", b"a", b"b", b"b", b"a"], [True, False, True, False, True]),
            ([b"x", b"y", b"z"], [True, True, True]),
            ([b"", b"", b"\x00"], [True, False, True]),
        ],
    )
    def test_change_sequence(self, contents: list[bytes], expected: list[bool]) -> None:
        """A change is reported exactly when content differs from the last fetch."""
        target = MemoryTarget()
        watcher = Watcher(target)

        results = []
        for content in contents:
            target.set(content)
            changed, error = watcher.updated()
            assert error is None
            results.append(changed)

        assert results == expected

    def test_fail_open_always_reports_change(self) -> None:
        target = MemoryTarget(fail_open=True)
        target.fail()
        watcher = Watcher(target)

        for _ in range(3):
            changed, error = watcher.updated()
            assert changed is True
            assert isinstance(error, FetchError)

    def test_fail_closed_never_reports_change(self) -> None:
        target = MemoryTarget(fail_open=False)
        target.fail()
        watcher = Watcher(target)

        for _ in range(3):
            changed, error = watcher.updated()
            assert changed is False
            assert isinstance(error, FetchError)

    def test_error_does_not_advance_fingerprint(self) -> None:
        """After an error the next call compares against the last good content."""
        target = MemoryTarget(b"good")
        watcher = Watcher(target)
        watcher.updated()

        target.fail()
        watcher.updated()
        assert watcher.last_fingerprint == fingerprint(b"good")

        target.set(b"good")
        assert watcher.updated() == (False, None)

        target.fail()
        watcher.updated()
        target.set(b"new")
        assert watcher.updated() == (True, None)

    def test_error_before_first_success(self) -> None:
        target = MemoryTarget(fail_open=False)
        target.fail()
        watcher = Watcher(target)

        watcher.updated()
        assert watcher.last_fingerprint is None

        target.set(b"data")
        assert watcher.updated() == (True, None)


class TestCheck:
    """Test the raising variant of updated()."""

    def test_returns_changed(self, memory_target: MemoryTarget) -> None:
        watcher = Watcher(memory_target)
        assert watcher.check() is True
        assert watcher.check() is False

    def test_fail_closed_raises(self) -> None:
        target = MemoryTarget(fail_open=False)
        target.fail()

        with pytest.raises(FetchError):
            Watcher(target).check()

    def test_fail_open_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        target = MemoryTarget(fail_open=True)
        target.fail()

        with caplog.at_level(logging.WARNING, logger="contentwatch"):
            assert Watcher(target).check() is True

        assert "Treating fetch failure as change" in caplog.text


class TestFileWatch:
    """Test manual polling against a real file."""

    def test_hello_world_scenario(self, tmp_path: Path) -> None:
        """hello -> (True), unchanged -> (False), world -> (True)."""
        path = tmp_path / "watched.txt"
        path.write_text("hello")
        watcher = file_watch(path)

        assert watcher.updated() == (True, None)
        assert watcher.updated() == (False, None)

        path.write_text("world")
        assert watcher.updated() == (True, None)

    def test_missing_file_fail_open(self, tmp_path: Path) -> None:
        watcher = file_watch(tmp_path / "missing.txt")

        changed, error = watcher.updated()

        assert changed is True
        assert isinstance(error, FetchError)

    def test_missing_file_fail_closed(self, tmp_path: Path) -> None:
        watcher = file_watch(tmp_path / "missing.txt", fail_open=False)

        changed, error = watcher.updated()

        assert changed is False
        assert isinstance(error, FetchError)

    def test_deleted_and_restored(self, tmp_path: Path) -> None:
        """Restoring identical content after a deletion is not a change."""
        path = tmp_path / "watched.txt"
        path.write_text("hello")
        watcher = file_watch(path)
        watcher.updated()

        path.unlink()
        changed, error = watcher.updated()
        assert (changed, error is not None) == (True, True)

        path.write_text("hello")
        assert watcher.updated() == (False, None)
