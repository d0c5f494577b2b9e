import structlog
from sqlalchemy.engine import Connection

from sync_pms.db.writers._upsert import upsert_rows
from sync_pms.models.rooms import Room
from sync_pms.schemas.pms import RoomRecord
from sync_pms.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def upsert_rooms(conn: Connection, records: list[RoomRecord]) -> int:
    """
    Upsert rooms by PMS id.

    Args:
        conn: Open connection; the caller owns the transaction
        records: Parsed room records

    Returns:
        int: Number of rooms written
    """
    now = utc_now()
    rows = [{**r.to_row(), "created_at": now, "updated_at": now} for r in records]

    count = upsert_rows(conn, Room, rows, update_columns=["number", "floor"])
    logger.info("Upserted %d rooms", count)
    return count
