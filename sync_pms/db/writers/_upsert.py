"""
Generic upsert helper with IS DISTINCT FROM optimization.

Every synced table is keyed by the PMS identifier, so each writer reduces
to "insert these rows, update the ones that already exist". The helper only
rewrites a row when one of its synced columns actually changed, which keeps
updated_at meaningful across repeated runs.
"""

from typing import Any, Iterator

from sqlalchemy import or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection

UPSERT_BATCH_SIZE = 500


def _insert_for(conn: Connection, table: Any) -> Any:
    # Production runs on PostgreSQL; the test suite uses SQLite, which
    # supports the same ON CONFLICT ... DO UPDATE construct.
    if conn.dialect.name == "sqlite":
        return sqlite.insert(table)
    return postgresql.insert(table)


def _chunks(rows: list[dict[str, Any]], size: int) -> Iterator[list[dict[str, Any]]]:
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


def dedupe_by_key(rows: list[dict[str, Any]], key: str = "id") -> list[dict[str, Any]]:
    """
    Collapse rows sharing the same key, keeping the last occurrence.

    ON CONFLICT DO UPDATE cannot touch the same row twice in one statement.
    """
    by_key: dict[Any, dict[str, Any]] = {}
    for row in rows:
        by_key[row[key]] = row
    return list(by_key.values())


def upsert_rows(
    conn: Connection,
    table: Any,
    rows: list[dict[str, Any]],
    update_columns: list[str],
    conflict_column: str = "id",
    batch_size: int = UPSERT_BATCH_SIZE,
) -> int:
    """
    Perform upsert with IS DISTINCT FROM optimization.

    Only updates rows where at least one of update_columns differs from the
    incoming value. updated_at is always written alongside those columns
    but never compared.

    Args:
        conn: Active database connection (within transaction)
        table: SQLAlchemy ORM table class (e.g., Room, Booking)
        rows: List of row dicts to upsert
        update_columns: Columns to compare and update on conflict
        conflict_column: Column name for ON CONFLICT (default "id")
        batch_size: Max rows per INSERT statement

    Returns:
        int: Number of distinct rows sent to the database

    Example:
        >>> with engine.begin() as conn:
        ...     upsert_rows(conn, Room, [{"id": 10, "number": "101", "floor": 1}],
        ...                 update_columns=["number", "floor"])
    """
    if not rows:
        return 0

    rows = dedupe_by_key(rows, conflict_column)

    for chunk in _chunks(rows, batch_size):
        stmt = _insert_for(conn, table).values(chunk)

        set_dict = {col: getattr(stmt.excluded, col) for col in update_columns}
        if "updated_at" in chunk[0]:
            set_dict["updated_at"] = stmt.excluded.updated_at

        distinct_check = or_(
            *[
                getattr(table, col).is_distinct_from(getattr(stmt.excluded, col))
                for col in update_columns
            ]
        )

        stmt = stmt.on_conflict_do_update(
            index_elements=[conflict_column],
            set_=set_dict,
            where=distinct_check,
        )

        conn.execute(stmt)

    return len(rows)
