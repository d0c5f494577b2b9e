import structlog
from sqlalchemy.engine import Connection

from sync_pms.db.writers._upsert import upsert_rows
from sync_pms.models.guests import Guest
from sync_pms.schemas.pms import GuestRecord
from sync_pms.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def upsert_guests(conn: Connection, records: list[GuestRecord]) -> int:
    now = utc_now()
    rows = [{**r.to_row(), "created_at": now, "updated_at": now} for r in records]

    count = upsert_rows(
        conn, Guest, rows, update_columns=["first_name", "last_name", "email"]
    )
    logger.info("Upserted %d guests", count)
    return count
