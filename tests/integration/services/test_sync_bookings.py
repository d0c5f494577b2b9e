"""
End-to-end tests of the booking sync against an in-memory database.

The PMS is replaced by FakePmsClient; everything from the fetchers down to
the SQL statements runs for real.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError

from sync_pms.db.writers.bookings import replace_booking_guests, upsert_bookings
from sync_pms.db.writers.guests import upsert_guests
from sync_pms.db.writers.room_types import upsert_room_types
from sync_pms.db.writers.rooms import upsert_rooms
from sync_pms.errors import FetchError, PersistenceError, ResponseError
from sync_pms.models.bookings import Booking, booking_guest
from sync_pms.models.guests import Guest
from sync_pms.models.room_types import RoomType
from sync_pms.models.rooms import Room
from sync_pms.services.sync import sync_bookings

pytestmark = pytest.mark.integration


def fetch_booking(engine, booking_id: int):
    with engine.connect() as conn:
        return conn.execute(select(Booking).where(Booking.id == booking_id)).fetchone()


def test_sync_persists_booking_with_related_entities(
    db_engine, routes, make_client, row_count, booking_guest_ids
):
    result = sync_bookings(make_client(routes), db_engine)

    assert result.synced == 1
    assert result.failed == 0

    with db_engine.connect() as conn:
        room_type = conn.execute(select(RoomType).where(RoomType.id == 1)).fetchone()
        room = conn.execute(select(Room).where(Room.id == 10)).fetchone()
        guests = conn.execute(select(Guest).order_by(Guest.id)).fetchall()

    assert room_type.name == "Deluxe Suite"
    assert (room.number, room.floor) == ("101", 1)
    assert [(g.id, g.first_name) for g in guests] == [(100, "John"), (101, "Jane")]

    booking = fetch_booking(db_engine, 1001)
    assert booking.external_id == "EXT-1001"
    assert booking.status == "confirmed"
    assert booking.notes == "Late check-in"
    assert booking.room_id == 10
    assert booking.room_type_id == 1

    assert row_count(db_engine, Booking) == 1
    assert booking_guest_ids(db_engine, 1001) == {100, 101}


def test_sync_empty_discovery_persists_nothing(db_engine, make_client, row_count):
    result = sync_bookings(make_client({"/api/bookings": {"data": []}}), db_engine)

    assert result.succeeded
    assert result.synced == 0
    assert row_count(db_engine, Booking) == 0
    assert row_count(db_engine, Guest) == 0


def test_sync_is_idempotent(db_engine, routes, make_client, row_count, booking_guest_ids):
    sync_bookings(make_client(routes), db_engine)
    sync_bookings(make_client(routes), db_engine)

    assert row_count(db_engine, Booking) == 1
    assert row_count(db_engine, Room) == 1
    assert row_count(db_engine, RoomType) == 1
    assert row_count(db_engine, Guest) == 2
    assert row_count(db_engine, booking_guest) == 2
    assert booking_guest_ids(db_engine, 1001) == {100, 101}


def test_sync_updates_existing_records_on_resync(
    db_engine, routes, make_client, row_count, booking_guest_ids
):
    sync_bookings(make_client(routes), db_engine)

    routes["/api/bookings/1001"] = {
        **routes["/api/bookings/1001"],
        "arrival_date": "2025-08-02",
        "departure_date": "2025-08-06",
        "guest_ids": [100],
        "status": "checked_in",
        "notes": None,
    }
    routes["/api/room-types/1"] = {"id": 1, "name": "Deluxe Suite Updated", "description": None}
    routes["/api/guests/100"] = {
        "id": 100,
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.updated@example.com",
    }

    result = sync_bookings(make_client(routes), db_engine)
    assert result.succeeded

    booking = fetch_booking(db_engine, 1001)
    assert booking.status == "checked_in"
    assert booking.arrival_date == date(2025, 8, 2)
    assert booking.notes is None

    with db_engine.connect() as conn:
        assert (
            conn.execute(select(RoomType.name).where(RoomType.id == 1)).scalar_one()
            == "Deluxe Suite Updated"
        )
        assert (
            conn.execute(select(Guest.email).where(Guest.id == 100)).scalar_one()
            == "john.updated@example.com"
        )

    assert row_count(db_engine, Booking) == 1
    assert booking_guest_ids(db_engine, 1001) == {100}
    # Guest 101 is detached but never deleted
    assert row_count(db_engine, Guest) == 2


def test_sync_continues_on_individual_booking_failure(db_engine, make_client, row_count):
    client = make_client(
        {
            "/api/bookings": {"data": [1001, 1002]},
            "/api/bookings/1001": ResponseError("GET /api/bookings/1001 returned HTTP 500", 500),
            "/api/bookings/1002": {
                "id": 1002,
                "external_id": "EXT-1002",
                "arrival_date": "2025-09-01",
                "departure_date": "2025-09-03",
                "room_id": 20,
                "room_type_id": 2,
                "guest_ids": [200],
                "status": "confirmed",
                "notes": None,
            },
            "/api/room-types/2": {"id": 2, "name": "Standard", "description": None},
            "/api/rooms/20": {"id": 20, "number": "201", "floor": 2},
            "/api/guests/200": {
                "id": 200,
                "first_name": "Bob",
                "last_name": "Smith",
                "email": "bob@example.com",
            },
        }
    )

    result = sync_bookings(client, db_engine)

    assert result.failed == 1
    assert result.synced == 1
    assert not result.succeeded
    assert row_count(db_engine, Booking) == 1
    assert fetch_booking(db_engine, 1002) is not None
    assert fetch_booking(db_engine, 1001) is None


def test_sync_writes_booking_even_when_related_fetch_failed(
    db_engine, routes, make_client, row_count, booking_guest_ids
):
    """
    No guard against dangling references: the booking keeps its room_id and
    full guest list even though room 10 and guest 101 could not be fetched.
    Foreign keys are enforced on the test engine, so this also checks the
    schema does not turn a related fetch failure into a rollback.
    """
    del routes["/api/rooms/10"]
    del routes["/api/guests/101"]

    result = sync_bookings(make_client(routes), db_engine)

    assert result.succeeded
    assert result.related_failed == 2
    assert row_count(db_engine, Room) == 0
    assert fetch_booking(db_engine, 1001).room_id == 10
    assert booking_guest_ids(db_engine, 1001) == {100, 101}


def test_sync_rolls_back_everything_on_persistence_error(
    db_engine, routes, make_client, row_count
):
    with patch(
        "sync_pms.services.sync.upsert_bookings",
        side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
    ):
        with pytest.raises(PersistenceError):
            sync_bookings(make_client(routes), db_engine)

    # Room types, rooms and guests were written before the failure and rolled back
    assert row_count(db_engine, RoomType) == 0
    assert row_count(db_engine, Room) == 0
    assert row_count(db_engine, Guest) == 0
    assert row_count(db_engine, Booking) == 0


def test_sync_discovery_failure_writes_nothing(db_engine, make_client, row_count):
    client = make_client({"/api/bookings": ResponseError("HTTP 500", 500)})

    with pytest.raises(FetchError):
        sync_bookings(client, db_engine)

    assert row_count(db_engine, Booking) == 0


def test_sync_dry_run_writes_nothing(db_engine, routes, make_client, row_count):
    result = sync_bookings(make_client(routes), db_engine, dry_run=True)

    assert result.synced == 1
    assert row_count(db_engine, Booking) == 0
    assert row_count(db_engine, Guest) == 0


def test_sync_writes_related_entities_before_bookings(db_engine, routes, make_client):
    """Room types, rooms and guests are upserted before bookings and their guests."""
    writers = MagicMock()
    with patch(
        "sync_pms.services.sync.upsert_room_types", wraps=upsert_room_types
    ) as room_types_writer, patch(
        "sync_pms.services.sync.upsert_rooms", wraps=upsert_rooms
    ) as rooms_writer, patch(
        "sync_pms.services.sync.upsert_guests", wraps=upsert_guests
    ) as guests_writer, patch(
        "sync_pms.services.sync.upsert_bookings", wraps=upsert_bookings
    ) as bookings_writer, patch(
        "sync_pms.services.sync.replace_booking_guests", wraps=replace_booking_guests
    ) as guests_replacer:
        writers.attach_mock(room_types_writer, "upsert_room_types")
        writers.attach_mock(rooms_writer, "upsert_rooms")
        writers.attach_mock(guests_writer, "upsert_guests")
        writers.attach_mock(bookings_writer, "upsert_bookings")
        writers.attach_mock(guests_replacer, "replace_booking_guests")

        sync_bookings(make_client(routes), db_engine)

    assert [name for name, _, _ in writers.mock_calls] == [
        "upsert_room_types",
        "upsert_rooms",
        "upsert_guests",
        "upsert_bookings",
        "replace_booking_guests",
    ]


def test_sync_commits_when_every_related_fetch_fails(
    db_engine, routes, make_client, row_count, booking_guest_ids
):
    """Room type, room and guest all missing: the booking is still committed as reported."""
    del routes["/api/room-types/1"]
    del routes["/api/rooms/10"]
    routes["/api/guests/101"] = ResponseError(
        "GET /api/guests/101 returned HTTP 500", status_code=500
    )

    with db_engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar_one() == 1

    result = sync_bookings(make_client(routes), db_engine)

    assert result.succeeded
    assert result.related_failed == 3
    assert row_count(db_engine, RoomType) == 0
    assert row_count(db_engine, Room) == 0
    assert row_count(db_engine, Guest) == 1
    booking = fetch_booking(db_engine, 1001)
    assert booking.room_id == 10
    assert booking.room_type_id == 1
    assert booking_guest_ids(db_engine, 1001) == {100, 101}


def test_booking_guest_rows_require_an_existing_booking(db_engine):
    """Association rows still cascade from bookings, so orphans are rejected."""
    with pytest.raises(IntegrityError):
        with db_engine.begin() as conn:
            conn.execute(booking_guest.insert().values(booking_id=9999, guest_id=100))


def test_sync_booking_without_guest_ids_fails_and_keeps_associations(
    db_engine, routes, make_client, booking_guest_ids
):
    """A booking payload missing guest_ids is rejected rather than detaching every guest."""
    sync_bookings(make_client(routes), db_engine)
    assert booking_guest_ids(db_engine, 1001) == {100, 101}

    payload = dict(routes["/api/bookings/1001"])
    del payload["guest_ids"]
    payload["status"] = "checked_in"
    routes["/api/bookings/1001"] = payload

    result = sync_bookings(make_client(routes), db_engine)

    assert result.synced == 0
    assert result.failed == 1
    assert not result.succeeded
    assert booking_guest_ids(db_engine, 1001) == {100, 101}
    assert fetch_booking(db_engine, 1001).status == "confirmed"
