from sync_pms.network.client import PmsClient
from sync_pms.pollers._fetch import fetch_record
from sync_pms.schemas.pms import GuestRecord, parse_guest


def get_guest(client: PmsClient, guest_id: int) -> GuestRecord:
    """Fetch a single guest from /api/guests/{id}."""
    return fetch_record(client, f"/api/guests/{guest_id}", "guest", guest_id, parse_guest)
