import json
from typing import Any, Callable, TypeVar

import structlog

from sync_pms.config import DEBUG
from sync_pms.errors import FetchError, ResponseError, TransportError
from sync_pms.network.client import PmsClient

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def fetch_record(
    client: PmsClient, path: str, entity: str, entity_id: int, parse: Callable[[Any], T]
) -> T:
    """
    Fetch one entity and parse it into its typed record.

    Args:
        client (PmsClient): Rate-limited PMS client
        path (str): Endpoint path for this entity
        entity (str): Entity name used in errors and logs
        entity_id (int): PMS identifier
        parse (Callable): Parse function turning the JSON body into a record

    Returns:
        The parsed record

    Raises:
        FetchError: If the request failed or the body could not be parsed.
    """
    try:
        payload = client.fetch_json(path)
        if DEBUG:
            logger.debug("Sample %s:\n%s", entity, json.dumps(payload, indent=2, default=str))
        return parse(payload)
    except (TransportError, ResponseError) as e:
        raise FetchError(entity, entity_id, e) from e
