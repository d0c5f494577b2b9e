from sync_pms.network.client import PmsClient
from sync_pms.pollers._fetch import fetch_record
from sync_pms.schemas.pms import RoomRecord, RoomTypeRecord, parse_room, parse_room_type


def get_room(client: PmsClient, room_id: int) -> RoomRecord:
    """Fetch a single room from /api/rooms/{id}."""
    return fetch_record(client, f"/api/rooms/{room_id}", "room", room_id, parse_room)


def get_room_type(client: PmsClient, room_type_id: int) -> RoomTypeRecord:
    """Fetch a single room type from /api/room-types/{id}."""
    return fetch_record(
        client, f"/api/room-types/{room_type_id}", "room type", room_type_id, parse_room_type
    )
