"""
Database fixtures for integration tests.

Tables are created in an in-memory SQLite database with foreign keys
enforced. schema_translate_map drops the "pms" schema so the PostgreSQL
models work unchanged.
"""

from __future__ import annotations

from typing import Generator

import pytest
from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from sync_pms.config import SCHEMA
from sync_pms.models.base import Base
from sync_pms.models.bookings import Booking, booking_guest  # noqa: F401
from sync_pms.models.guests import Guest  # noqa: F401
from sync_pms.models.room_types import RoomType  # noqa: F401
from sync_pms.models.rooms import Room  # noqa: F401


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database with all sync tables."""
    base_engine = create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(base_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    engine = base_engine.execution_options(schema_translate_map={SCHEMA: None})

    Base.metadata.create_all(engine)

    yield engine

    base_engine.dispose()


def count_rows(engine: Engine, table: object) -> int:
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(table)).scalar_one()


def guest_ids_for(engine: Engine, booking_id: int) -> set[int]:
    with engine.connect() as conn:
        return set(
            conn.execute(
                select(booking_guest.c.guest_id).where(booking_guest.c.booking_id == booking_id)
            ).scalars()
        )


@pytest.fixture
def row_count():
    """Return a helper counting rows in a table."""
    return count_rows


@pytest.fixture
def booking_guest_ids():
    """Return a helper listing the guest ids associated to a booking."""
    return guest_ids_for
