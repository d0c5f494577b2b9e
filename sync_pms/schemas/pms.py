"""
Typed records for PMS API payloads.

Each entity has a pydantic model and an explicit parse function. Parse
functions raise ResponseError on malformed input so callers deal with a
single error type regardless of whether the body was missing a field or
had the wrong shape.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sync_pms.errors import ResponseError


class BookingStatus(str, Enum):
    """Booking statuses known to the PMS. Unknown values are still accepted."""

    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class PmsRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., description="PMS-assigned identifier, used as local primary key")

    def to_row(self) -> dict[str, Any]:
        """Column values for the record's table."""
        return self.model_dump()


class RoomTypeRecord(PmsRecord):
    name: str
    description: Optional[str] = None


class RoomRecord(PmsRecord):
    number: str
    floor: int


class GuestRecord(PmsRecord):
    first_name: str
    last_name: str
    email: str


class BookingRecord(PmsRecord):
    """
    A booking as reported by GET /api/bookings/{id}.

    guest_ids is not a column: it drives the booking_guest association
    and is excluded from to_row().
    """

    external_id: str
    arrival_date: date
    departure_date: date
    room_id: int
    room_type_id: int
    guest_ids: list[int]
    status: str
    notes: Optional[str] = None

    @property
    def known_status(self) -> Optional[BookingStatus]:
        try:
            return BookingStatus(self.status)
        except ValueError:
            return None

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(exclude={"guest_ids"})


RecordT = TypeVar("RecordT", bound=PmsRecord)


def _parse(model: Type[RecordT], payload: Any) -> RecordT:
    if not isinstance(payload, dict):
        raise ResponseError(
            f"Expected a JSON object for {model.__name__}, got {type(payload).__name__}"
        )
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ResponseError(f"Malformed {model.__name__} payload: {e}") from e


def parse_booking(payload: Any) -> BookingRecord:
    return _parse(BookingRecord, payload)


def parse_room(payload: Any) -> RoomRecord:
    return _parse(RoomRecord, payload)


def parse_room_type(payload: Any) -> RoomTypeRecord:
    return _parse(RoomTypeRecord, payload)


def parse_guest(payload: Any) -> GuestRecord:
    return _parse(GuestRecord, payload)
