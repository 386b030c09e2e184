import argparse
import asyncio
import logging
from typing import Optional, Sequence

from rich.live import Live

from .config import settings
from .coordinator import SnapshotCoordinator
from .errors import ProbeError
from .report import console, layout

logger = logging.getLogger("sysfetch")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sysfetch",
        description="Displays system information in a terminal-friendly format. Press Ctrl+C to exit.",
    )
    parser.add_argument(
        "-l",
        "--live",
        action="store_true",
        help="Display system information in live mode (refreshes every --interval seconds)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=settings.REFRESH_INTERVAL_SECONDS,
        help=f"Seconds between refreshes in live mode (default: {settings.REFRESH_INTERVAL_SECONDS:g})",
    )
    return parser


async def run_once(coordinator: SnapshotCoordinator) -> int:
    try:
        snapshot = await coordinator.collect_snapshot()
    except ProbeError as e:
        logger.error(f"Snapshot collection failed: {e}")
        return 1
    console.print(layout(snapshot))
    return 0


async def run_live(coordinator: SnapshotCoordinator, interval: float) -> int:
    """
    Refresh forever in place. A failed refresh is logged and retried on the
    next tick, leaving the last good snapshot on screen.
    """
    logger.info(f"Live mode, refreshing every {interval:g}s")
    with Live(console=console, auto_refresh=False) as live:
        while True:
            try:
                snapshot = await coordinator.collect_snapshot()
            except ProbeError as e:
                logger.error(f"Snapshot collection failed: {e}")
            else:
                live.update(layout(snapshot), refresh=True)
            await asyncio.sleep(interval)


def main(argv: Optional[Sequence[str]] = None) -> int:
    # Installs the formatter before anything else logs
    from . import logger as _logging  # noqa: F401

    args = build_parser().parse_args(argv)
    if args.interval <= 0:
        logger.error("--interval must be positive")
        return 2

    coordinator = SnapshotCoordinator()
    try:
        if args.live:
            return asyncio.run(run_live(coordinator, args.interval))
        return asyncio.run(run_once(coordinator))
    except KeyboardInterrupt:
        logger.info("sysfetch stopped by user.")
        return 130
