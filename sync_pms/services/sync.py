"""Booking sync orchestrator for the PMS integration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, TypeVar

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from sync_pms.db.writers.bookings import replace_booking_guests, upsert_bookings
from sync_pms.db.writers.guests import upsert_guests
from sync_pms.db.writers.room_types import upsert_room_types
from sync_pms.db.writers.rooms import upsert_rooms
from sync_pms.errors import PersistenceError
from sync_pms.metrics import fetch_failures, records_synced, sync_duration
from sync_pms.network.client import PmsClient
from sync_pms.pollers.bookings import get_booking, list_booking_ids
from sync_pms.pollers.guests import get_guest
from sync_pms.pollers.rooms import get_room, get_room_type
from sync_pms.schemas.pms import BookingRecord, GuestRecord, RoomRecord, RoomTypeRecord

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class SyncResult:
    """
    Outcome of one sync run.

    Attributes:
        synced: Bookings fetched successfully (and written unless dry-run)
        failed: Bookings that could not be fetched
        related_failed: Room types, rooms and guests that could not be fetched;
                        reported but not part of the pass/fail outcome
    """

    synced: int = 0
    failed: int = 0
    related_failed: int = 0

    @property
    def succeeded(self) -> bool:
        return self.failed == 0


@dataclass
class FetchedBatch:
    bookings: list[BookingRecord]
    room_types: list[RoomTypeRecord]
    rooms: list[RoomRecord]
    guests: list[GuestRecord]


def _unique(ids: list[int]) -> list[int]:
    seen: dict[int, None] = {}
    for i in ids:
        seen.setdefault(i, None)
    return list(seen)


def fetch_related(
    ids: set[int], fetcher: Callable[[int], T], entity_name: str
) -> tuple[list[T], int]:
    """
    Fetch each ID with fetcher, skipping the ones that fail.

    Args:
        ids: Distinct entity IDs to fetch
        fetcher: Single-ID fetch function
        entity_name: Used in log messages and metrics labels

    Returns:
        tuple: (records fetched, number of failures)
    """
    records: list[T] = []
    failed = 0

    for entity_id in sorted(ids):
        try:
            records.append(fetcher(entity_id))
        except Exception as e:
            failed += 1
            fetch_failures.labels(entity_type=entity_name).inc()
            logger.warning(f"Failed to fetch {entity_name} {entity_id}", error=str(e))

    return records, failed


def fetch_bookings(client: PmsClient, booking_ids: list[int], result: SyncResult) -> FetchedBatch:
    """
    Fetch every booking, then the distinct room types, rooms and guests they reference.

    Individual failures are counted on result and skipped; a failed booking
    contributes nothing to the batch.
    """
    bookings: list[BookingRecord] = []
    room_ids: set[int] = set()
    room_type_ids: set[int] = set()
    guest_ids: set[int] = set()

    total = len(booking_ids)
    for position, booking_id in enumerate(booking_ids, start=1):
        logger.debug("booking_progress", current=position, total=total)
        try:
            booking = get_booking(client, booking_id)
        except Exception as e:
            result.failed += 1
            fetch_failures.labels(entity_type="booking").inc()
            logger.warning(f"Failed to fetch booking {booking_id}", error=str(e))
            continue

        bookings.append(booking)
        room_ids.add(booking.room_id)
        room_type_ids.add(booking.room_type_id)
        guest_ids.update(booking.guest_ids)

    result.synced = len(bookings)

    logger.info(
        "Fetching related room types, rooms, and guests",
        room_types=len(room_type_ids),
        rooms=len(room_ids),
        guests=len(guest_ids),
    )

    room_types, rt_failed = fetch_related(
        room_type_ids, lambda i: get_room_type(client, i), "room type"
    )
    rooms, room_failed = fetch_related(room_ids, lambda i: get_room(client, i), "room")
    guests, guest_failed = fetch_related(guest_ids, lambda i: get_guest(client, i), "guest")
    result.related_failed = rt_failed + room_failed + guest_failed

    return FetchedBatch(bookings=bookings, room_types=room_types, rooms=rooms, guests=guests)


def write_batch(engine: Engine, batch: FetchedBatch) -> None:
    """
    Upsert the whole batch in one transaction, parents before children.

    Bookings are written even when their room, room type or a guest could
    not be fetched; the references are stored as the PMS reported them.

    Raises:
        PersistenceError: If any statement fails. Nothing from the batch is kept.
    """
    try:
        with engine.begin() as conn:
            upsert_room_types(conn, batch.room_types)
            upsert_rooms(conn, batch.rooms)
            upsert_guests(conn, batch.guests)
            upsert_bookings(conn, batch.bookings)

            for booking in batch.bookings:
                replace_booking_guests(conn, booking.id, booking.guest_ids)
    except SQLAlchemyError as e:
        logger.error("sync_transaction_rolled_back", error=str(e))
        raise PersistenceError(f"Sync transaction failed: {e}") from e

    records_synced.labels(entity_type="room_type").inc(len(batch.room_types))
    records_synced.labels(entity_type="room").inc(len(batch.rooms))
    records_synced.labels(entity_type="guest").inc(len(batch.guests))
    records_synced.labels(entity_type="booking").inc(len(batch.bookings))


def sync_bookings(
    client: PmsClient,
    engine: Engine,
    since: Optional[date] = None,
    dry_run: bool = False,
) -> SyncResult:
    """
    Pull bookings and their related entities from the PMS and upsert them.

    Args:
        client (PmsClient): Rate-limited PMS client
        engine (Engine): SQLAlchemy engine for the local store
        since (date, optional): Only sync bookings updated after this date
        dry_run (bool): If True, fetch everything but skip DB writes

    Returns:
        SyncResult: Counts of synced and failed bookings

    Raises:
        FetchError: If booking discovery fails.
        PersistenceError: If the database transaction fails.
    """
    logger.info("PMS sync started", since=since.isoformat() if since else None, dry_run=dry_run)
    result = SyncResult()

    with sync_duration.time():
        booking_ids = list_booking_ids(client, since)

        unique_ids = _unique(booking_ids)
        if len(unique_ids) != len(booking_ids):
            logger.warning(
                "Discovery returned %d duplicate booking id(s)",
                len(booking_ids) - len(unique_ids),
            )

        logger.info("Found %d bookings to sync", len(unique_ids))
        if not unique_ids:
            logger.info("Nothing to sync")
            return result

        batch = fetch_bookings(client, unique_ids, result)

        if dry_run:
            logger.info(
                "[DRY RUN] Would upsert records",
                room_types=len(batch.room_types),
                rooms=len(batch.rooms),
                guests=len(batch.guests),
                bookings=len(batch.bookings),
            )
        else:
            logger.info("Upserting records into database")
            write_batch(engine, batch)

    logger.info(
        "PMS sync completed",
        synced=result.synced,
        failed=result.failed,
        related_failed=result.related_failed,
    )
    return result
