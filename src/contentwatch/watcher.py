"""Content change detection by fingerprint comparison.

A Watcher wraps a Target and reports whether its content changed since the
last observation. Two consumption modes are offered:

1. Manual polling with ``updated()``, run synchronously by the caller.
2. Interval notification with ``on_interval()``, run as an asyncio task that
   emits an empty signal on a Notifications stream for every change.

The two modes keep separate fingerprints and never interfere.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import NamedTuple

from contentwatch.fingerprint import fingerprint, fingerprints_match
from contentwatch.logging import VERBOSE, get_logger
from contentwatch.target import FetchError, FileTarget, Target

log = get_logger("watcher")

# Queue marker for a closed stream
_CLOSED = object()


class DiffResult(NamedTuple):
    """Outcome of comparing a target's content against a fingerprint."""

    fingerprint: bytes | None  # fingerprint to retain for the next check
    changed: bool
    error: FetchError | None


class IntervalState(Enum):
    """Lifecycle of an interval notification loop."""

    RUNNING = "running"
    CANCELLING = "cancelling"
    STOPPED = "stopped"


class Notifications:
    """Stream of change notifications produced by ``Watcher.on_interval()``.

    Sends are rendezvous: the loop waits until a consumer has taken each
    notification. Once the loop stops the stream is closed and iteration
    ends.

    Example:
        stream, cancel = watcher.on_interval(1.0)
        async for _ in stream:
            reload()
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=1)
        self._state = IntervalState.RUNNING
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> IntervalState:
        """Get the state of the loop feeding this stream."""
        return self._state

    @property
    def closed(self) -> bool:
        """True once no further notifications can arrive."""
        return self._state is IntervalState.STOPPED

    async def receive(self) -> bool:
        """Wait for the next notification.

        Returns:
            True for a notification, False once the stream is closed.
        """
        item = await self._queue.get()
        self._queue.task_done()
        if item is _CLOSED:
            # Leave the marker for any other or later receivers
            self._queue.put_nowait(_CLOSED)
            return False
        return True

    async def _send(self) -> None:
        """Hand one notification to a consumer, waiting until it is taken."""
        await self._queue.put(None)
        await self._queue.join()

    def _cancel(self) -> None:
        if self._state is IntervalState.RUNNING:
            self._state = IntervalState.CANCELLING
        if self._task is not None:
            self._task.cancel()

    def _close(self) -> None:
        if self._state is IntervalState.STOPPED:
            return
        # Drop a notification nobody received
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        self._queue.put_nowait(_CLOSED)
        self._state = IntervalState.STOPPED

    def __aiter__(self) -> Notifications:
        return self

    async def __anext__(self) -> None:
        if not await self.receive():
            raise StopAsyncIteration
        return None


class Watcher:
    """Detects changes to a Target's content.

    ``updated()`` always reports a change on its first successful call, since
    there is no earlier observation to compare against. It is not safe for
    concurrent use.

    Example:
        watcher = Watcher(FileTarget("config.yaml"))
        changed, err = watcher.updated()
        if changed:
            reload()
    """

    def __init__(self, target: Target) -> None:
        """Initialize the watcher.

        Args:
            target: The content source to observe.
        """
        self._target = target
        self._last_fingerprint: bytes | None = None

    @property
    def target(self) -> Target:
        """Get the observed target."""
        return self._target

    @property
    def last_fingerprint(self) -> bytes | None:
        """Get the fingerprint of the last successful ``updated()`` check."""
        return self._last_fingerprint

    def diff(self, token: bytes | None) -> DiffResult:
        """Compare the target's current content against ``token``.

        On a fetch error ``token`` is returned unchanged and ``changed``
        follows the target's fail-open policy.

        Args:
            token: Fingerprint of the previous observation, or None.

        Returns:
            DiffResult with the fingerprint to retain, the changed flag and
            any fetch error.
        """
        try:
            content = self._target.content()
        except FetchError as e:
            return DiffResult(token, self._target.fail_open(), e)

        current = fingerprint(content)
        if fingerprints_match(current, token):
            return DiffResult(token, False, None)
        return DiffResult(current, True, None)

    def updated(self) -> tuple[bool, FetchError | None]:
        """Check whether the content changed since the last call.

        The retained fingerprint only advances when the fetch succeeded, so
        after an error the next call still compares against the last good
        content.

        Returns:
            Tuple of (changed, error).
        """
        result = self.diff(self._last_fingerprint)
        if result.error is None:
            self._last_fingerprint = result.fingerprint
        else:
            log.debug("Fetch failed for %r: %s", self._target, result.error)
        return result.changed, result.error

    def check(self) -> bool:
        """Raising variant of ``updated()``.

        Returns:
            True if the content changed, or if the fetch failed and the
            target is fail-open.

        Raises:
            FetchError: If the fetch failed and the target is fail-closed.
        """
        changed, error = self.updated()
        if error is not None:
            if not changed:
                raise error
            log.warning("Treating fetch failure as change: %s", error)
        return changed

    def on_interval(self, period: float) -> tuple[Notifications, Callable[[], None]]:
        """Start emitting a notification every time the content changes.

        The content is checked every ``period`` seconds by an asyncio task
        with its own fingerprint, seeded from the content at call time. Must be
        called with a running event loop.

        Args:
            period: Seconds between checks.

        Returns:
            Tuple of (notification stream, cancel function). Cancelling is
            idempotent and closes the stream.
        """
        if period <= 0:
            raise ValueError(f"period must be positive, got {period!r}")

        loop = asyncio.get_running_loop()
        stream = Notifications()

        # Baseline is taken now so changes made before the task first runs count
        try:
            baseline = self.diff(None)
        except Exception:
            log.exception("Interval watch for %r stopped by target error", self._target)
            stream._close()
            return stream, stream._cancel

        task = loop.create_task(
            self._interval_loop(period, stream, baseline),
            name=f"contentwatch-interval-{id(stream):x}",
        )
        stream._task = task
        # Also covers cancellation before the task ever ran
        task.add_done_callback(lambda _: stream._close())
        return stream, stream._cancel

    async def _interval_loop(
        self, period: float, stream: Notifications, baseline: DiffResult
    ) -> None:
        """Tick loop feeding ``stream`` until cancelled."""
        loop = asyncio.get_running_loop()

        last = baseline.fingerprint if baseline.error is None else None
        failing = baseline.error is not None
        log.debug("Interval watch started for %r (period=%.3fs)", self._target, period)

        next_tick = loop.time() + period
        try:
            while True:
                await asyncio.sleep(max(0.0, next_tick - loop.time()))

                # Fixed-rate schedule; ticks missed by a slow fetch are skipped
                next_tick += period
                now = loop.time()
                if next_tick <= now:
                    next_tick += (int((now - next_tick) // period) + 1) * period

                result = self.diff(last)
                if result.error is not None:
                    log.debug("Tick fetch failed for %r: %s", self._target, result.error)
                    # Fail-open notifies on the first failing tick of a streak only
                    emit = result.changed and not failing
                    failing = True
                    if not emit:
                        continue
                else:
                    failing = False
                    if not result.changed:
                        continue
                    last = result.fingerprint

                log.log(VERBOSE, "Change detected for %r", self._target)
                await stream._send()
        except asyncio.CancelledError:
            log.debug("Interval watch cancelled for %r", self._target)
            raise
        except Exception:
            log.exception("Interval watch for %r stopped by target error", self._target)
        finally:
            stream._close()


def file_watch(path: str | Path, fail_open: bool = True) -> Watcher:
    """Create a Watcher for a file.

    Args:
        path: File to watch.
        fail_open: Treat an unreadable file as a change (default True).
    """
    return Watcher(FileTarget(path, fail_open=fail_open))
