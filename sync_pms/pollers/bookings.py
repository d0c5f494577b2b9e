from datetime import date
from typing import Optional

import structlog

from sync_pms.errors import FetchError, ResponseError, TransportError
from sync_pms.network.client import PmsClient
from sync_pms.pollers._fetch import fetch_record
from sync_pms.schemas.pms import BookingRecord, parse_booking

logger = structlog.get_logger(__name__)

BOOKINGS_PATH = "/api/bookings"


def list_booking_ids(client: PmsClient, updated_after: Optional[date] = None) -> list[int]:
    """
    Discover booking IDs from the PMS /api/bookings endpoint.

    Args:
        client (PmsClient): Rate-limited PMS client
        updated_after (date, optional): Only return bookings updated after this date

    Returns:
        list[int]: Booking IDs, or an empty list when the response has no data

    Raises:
        FetchError: If the request failed or "data" is not a list of integers.
    """
    params = {"updated_at.gt": updated_after.isoformat()} if updated_after else {}

    try:
        body = client.fetch_json(BOOKINGS_PATH, params)
        if not isinstance(body, dict):
            raise ResponseError("Expected a JSON object from booking discovery")

        ids = body.get("data")
        if ids is None:
            ids = []
        if not isinstance(ids, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in ids
        ):
            raise ResponseError("Booking discovery 'data' must be a list of integer IDs")
    except (TransportError, ResponseError) as e:
        raise FetchError("booking ids", None, e) from e

    logger.info("Discovered %d booking IDs from PMS", len(ids), since=params.get("updated_at.gt"))
    return ids


def get_booking(client: PmsClient, booking_id: int) -> BookingRecord:
    """Fetch a single booking from /api/bookings/{id}."""
    return fetch_record(
        client, f"{BOOKINGS_PATH}/{booking_id}", "booking", booking_id, parse_booking
    )
