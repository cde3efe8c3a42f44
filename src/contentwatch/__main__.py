"""Command-line driver for contentwatch.

Usage:
    python -m contentwatch poll config.yaml
    python -m contentwatch emit --interval 0.5 --duration 30 config.yaml

``poll`` calls ``Watcher.updated()`` on every interval and prints the
result. ``emit`` starts ``Watcher.on_interval()`` and prints a line per
notification until the duration elapses.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from contentwatch import __version__
from contentwatch.config import load_config
from contentwatch.config.schema import MIN_INTERVAL, Config
from contentwatch.logging import get_logger, setup_logging
from contentwatch.watcher import Watcher, file_watch

log = get_logger("cli")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="contentwatch",
        description="Watch a file for content changes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="Increase verbosity (can be repeated)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file path",
    )
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between checks (default from config, 1.0)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        help="Seconds to run before stopping (default from config, 10.0)",
    )
    parser.add_argument(
        "--fail-closed",
        action="store_true",
        help="Do not treat an unreadable file as a change",
    )
    parser.add_argument(
        "mode",
        choices=["poll", "emit"],
        help="poll: call updated() each interval; emit: print interval notifications",
    )
    parser.add_argument("path", type=Path, help="File to watch")
    return parser


async def run_poll(watcher: Watcher, interval: float, duration: float, console: Console) -> None:
    """Poll ``watcher`` every ``interval`` seconds for ``duration`` seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + duration
    while True:
        await asyncio.sleep(interval)
        if loop.time() > deadline:
            break
        changed, error = watcher.updated()
        console.print(f"Updated? {changed}, {error}", markup=False, soft_wrap=True)
    console.print("fin")


async def run_emit(watcher: Watcher, interval: float, duration: float, console: Console) -> None:
    """Print a line per notification for ``duration`` seconds, then cancel."""
    stream, cancel = watcher.on_interval(interval)

    async def consume() -> None:
        async for _ in stream:
            console.print("Updated!")

    consumer = asyncio.create_task(consume())
    try:
        await asyncio.sleep(duration)
    finally:
        console.print("Cancelling watch interval")
        cancel()
        await consumer


def _settings(args: argparse.Namespace, config: Config) -> tuple[float, float, bool]:
    interval = args.interval if args.interval is not None else config.watch.interval
    duration = args.duration if args.duration is not None else config.watch.duration
    fail_open = config.watch.fail_open and not args.fail_closed
    return max(MIN_INTERVAL, interval), max(0.0, duration), fail_open


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.verbose is not None:
        config.logging.verbose = 2 + args.verbose
    setup_logging(config.logging)

    interval, duration, fail_open = _settings(args, config)
    watcher = file_watch(args.path, fail_open=fail_open)
    console = Console()
    log.debug(
        "Watching %s (mode=%s, interval=%.2fs, fail_open=%s)",
        args.path, args.mode, interval, fail_open,
    )

    runner = run_poll if args.mode == "poll" else run_emit
    try:
        asyncio.run(runner(watcher, interval, duration, console))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
