import json
from collections import Counter
from typing import Iterable

import structlog
from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Connection

from sync_pms.config import DEBUG
from sync_pms.db.writers._upsert import upsert_rows
from sync_pms.models.bookings import Booking, booking_guest
from sync_pms.schemas.pms import BookingRecord
from sync_pms.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

BOOKING_COLUMNS = [
    "external_id",
    "arrival_date",
    "departure_date",
    "room_id",
    "room_type_id",
    "status",
    "notes",
]


def upsert_bookings(conn: Connection, records: list[BookingRecord]) -> int:
    """
    Upsert bookings by PMS id.

    Foreign keys are written as reported by the PMS. The room, room type
    and guests must be upserted first in the same transaction.

    Args:
        conn: Open connection; the caller owns the transaction
        records: Parsed booking records

    Returns:
        int: Number of bookings written
    """
    ids = [r.id for r in records]
    dups = [bid for bid, count in Counter(ids).items() if count > 1]
    if dups:
        logger.warning("Found %d duplicate booking id(s) in batch, keeping last", len(dups))

    now = utc_now()
    rows = [{**r.to_row(), "created_at": now, "updated_at": now} for r in records]

    if DEBUG and rows:
        logger.debug("Sample booking to upsert:\n%s", json.dumps(rows[0], indent=2, default=str))

    count = upsert_rows(conn, Booking, rows, update_columns=BOOKING_COLUMNS)
    logger.info("Upserted %d bookings", count)
    return count


def replace_booking_guests(conn: Connection, booking_id: int, guest_ids: Iterable[int]) -> None:
    """
    Set a booking's guests to exactly guest_ids.

    Guests no longer listed are detached and new ones attached; rows that
    are already correct are left alone, so identical input is a no-op.

    Args:
        conn: Open connection; the caller owns the transaction
        booking_id: PMS booking ID
        guest_ids: Guest IDs currently reported by the PMS for this booking
    """
    wanted = set(guest_ids)

    existing = set(
        conn.execute(
            select(booking_guest.c.guest_id).where(booking_guest.c.booking_id == booking_id)
        ).scalars()
    )

    stale = existing - wanted
    added = wanted - existing

    if stale:
        conn.execute(
            delete(booking_guest).where(
                booking_guest.c.booking_id == booking_id,
                booking_guest.c.guest_id.in_(sorted(stale)),
            )
        )

    if added:
        conn.execute(
            insert(booking_guest),
            [{"booking_id": booking_id, "guest_id": gid} for gid in sorted(added)],
        )

    if stale or added:
        logger.debug(
            "booking_guests_replaced",
            booking_id=booking_id,
            attached=sorted(added),
            detached=sorted(stale),
        )
