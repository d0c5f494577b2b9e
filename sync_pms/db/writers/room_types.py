import structlog
from sqlalchemy.engine import Connection

from sync_pms.db.writers._upsert import upsert_rows
from sync_pms.models.room_types import RoomType
from sync_pms.schemas.pms import RoomTypeRecord
from sync_pms.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def upsert_room_types(conn: Connection, records: list[RoomTypeRecord]) -> int:
    """
    Upsert room types by PMS id.

    Args:
        conn: Open connection; the caller owns the transaction
        records: Parsed room type records

    Returns:
        int: Number of room types written
    """
    now = utc_now()
    rows = [{**r.to_row(), "created_at": now, "updated_at": now} for r in records]

    count = upsert_rows(conn, RoomType, rows, update_columns=["name", "description"])
    logger.info("Upserted %d room types", count)
    return count
