"""
Shared test configuration.

Required settings are given harmless defaults before any sync_pms module
is imported, so the suite never needs a real PMS or PostgreSQL.
"""

from __future__ import annotations

import os
import tempfile
from typing import Any, Mapping, Optional

import pytest

os.environ.setdefault(
    "DATABASE_URL", f"sqlite+pysqlite:///{os.path.join(tempfile.gettempdir(), 'sync_pms_test.db')}"
)
os.environ.setdefault("PMS_BASE_URL", "https://pms.test")

from sync_pms.errors import ResponseError  # noqa: E402

BOOKING_1001 = {
    "id": 1001,
    "external_id": "EXT-1001",
    "arrival_date": "2025-08-01",
    "departure_date": "2025-08-05",
    "room_id": 10,
    "room_type_id": 1,
    "guest_ids": [100, 101],
    "status": "confirmed",
    "notes": "Late check-in",
}


class FakePmsClient:
    """
    Stand-in for PmsClient that serves canned payloads by path.

    A route mapped to an exception raises it; an unknown path behaves like
    a 404 from the PMS.
    """

    def __init__(self, routes: Mapping[str, Any]):
        self.routes = dict(routes)
        self.calls: list[tuple[str, dict[str, str]]] = []

    def fetch_json(self, path: str, params: Optional[Mapping[str, str]] = None) -> Any:
        self.calls.append((path, dict(params or {})))
        if path not in self.routes:
            raise ResponseError(f"GET {path} returned HTTP 404", status_code=404)
        response = self.routes[path]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]


def pms_routes() -> dict[str, Any]:
    """Routes for one booking (1001) with its room, room type and two guests."""
    return {
        "/api/bookings": {"data": [1001]},
        "/api/bookings/1001": dict(BOOKING_1001),
        "/api/room-types/1": {
            "id": 1,
            "name": "Deluxe Suite",
            "description": "A deluxe suite with sea view",
        },
        "/api/rooms/10": {"id": 10, "number": "101", "floor": 1},
        "/api/guests/100": {
            "id": 100,
            "first_name": "John",
            "last_name": "Doe",
            "email": "john@example.com",
        },
        "/api/guests/101": {
            "id": 101,
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@example.com",
        },
    }


@pytest.fixture
def routes() -> dict[str, Any]:
    """Mutable copy of the default PMS routes for the booking 1001 scenario."""
    return pms_routes()


@pytest.fixture
def make_client() -> type[FakePmsClient]:
    """Factory for FakePmsClient instances."""
    return FakePmsClient
