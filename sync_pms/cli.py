"""
Command-line entry point for the PMS booking sync.

Usage:
    sync-pms sync-bookings [--since YYYY-MM-DD] [--dry-run]

Exit status is 0 when every booking was fetched, 1 when any booking fetch
failed or the run aborted, and 2 on usage errors.
"""

import argparse
import sys
from datetime import date
from typing import Optional, Sequence

import structlog

from sync_pms.config import DRY_RUN, METRICS_PUSHGATEWAY_URL
from sync_pms.db.engine import check_engine_health, engine
from sync_pms.errors import SyncError
from sync_pms.logging_config import setup_logging
from sync_pms.metrics import push_metrics, sync_runs
from sync_pms.network.client import PmsClient
from sync_pms.services.sync import sync_bookings
from sync_pms.utils.datetime import parse_since

logger = structlog.get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _since_arg(value: str) -> date:
    try:
        return parse_since(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sync-pms", description="Sync hotel bookings from the external PMS API."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync-bookings", help="Sync bookings, rooms, room types and guests"
    )
    sync_parser.add_argument(
        "--since",
        type=_since_arg,
        default=None,
        help="Only sync bookings updated after this date (YYYY-MM-DD)",
    )
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=DRY_RUN,
        help="Fetch from the PMS but do not write to the database",
    )
    return parser


def run_sync_bookings(since: Optional[date], dry_run: bool) -> int:
    """
    Run one booking sync and translate its outcome into an exit code.

    Args:
        since: Optional updated-after cutoff
        dry_run: If True, skip DB writes

    Returns:
        int: Process exit code
    """
    if not dry_run and not check_engine_health(engine):
        logger.error("Database is not reachable, aborting sync")
        sync_runs.labels(status="error").inc()
        return EXIT_FAILURE

    client = PmsClient.from_config()

    try:
        result = sync_bookings(client, engine, since=since, dry_run=dry_run)
    except SyncError as e:
        logger.exception("PMS sync aborted", error=str(e))
        sync_runs.labels(status="error").inc()
        return EXIT_FAILURE

    print(f"Sync complete: {result.synced} bookings synced, {result.failed} failed.")
    sync_runs.labels(status="success" if result.succeeded else "failure").inc()

    return EXIT_SUCCESS if result.succeeded else EXIT_FAILURE


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    exit_code = EXIT_FAILURE
    if args.command == "sync-bookings":
        exit_code = run_sync_bookings(since=args.since, dry_run=args.dry_run)

    if METRICS_PUSHGATEWAY_URL:
        push_metrics(METRICS_PUSHGATEWAY_URL)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
