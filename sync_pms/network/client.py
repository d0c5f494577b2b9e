"""
Client for the PMS REST API.

Every request passes through a RateLimiter owned by the client instance and
is attempted exactly once: failures surface as TransportError or
ResponseError and retry policy is left to the caller.
"""

from __future__ import annotations

import re
import time
from typing import Any, Mapping, Optional
from urllib.parse import urljoin

import requests
import structlog

from sync_pms.errors import ResponseError, TransportError
from sync_pms.metrics import api_latency, api_requests
from sync_pms.network.rate_limiter import RateLimiter

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10.0

_ID_SEGMENT = re.compile(r"/\d+(?=/|$)")


def endpoint_label(path: str) -> str:
    """
    Collapse numeric path segments so metrics labels stay low-cardinality.

    Example:
        >>> endpoint_label("/api/bookings/1001")
        '/api/bookings/{id}'
    """
    return _ID_SEGMENT.sub("/{id}", path)


class PmsClient:
    """
    Rate-limited JSON client for the PMS API.

    Attributes:
        base_url: API root, e.g. "https://pms.example.com"
        rate_limiter: Limiter consulted before every request
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        rate_limiter: Optional[RateLimiter] = None,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.rate_limiter = rate_limiter or RateLimiter()
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_config(cls) -> PmsClient:
        """Build a client from environment configuration."""
        from sync_pms.config import (
            MIN_REQUEST_INTERVAL,
            PMS_API_TOKEN,
            PMS_BASE_URL,
            REQUEST_TIMEOUT,
        )

        return cls(
            base_url=PMS_BASE_URL,
            rate_limiter=RateLimiter(min_interval=MIN_REQUEST_INTERVAL),
            token=PMS_API_TOKEN,
            timeout=REQUEST_TIMEOUT,
        )

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def fetch_json(self, path: str, params: Optional[Mapping[str, str]] = None) -> Any:
        """
        GET a PMS endpoint and return the decoded JSON body.

        Args:
            path: Endpoint path (e.g. "/api/bookings/1001")
            params: Optional query parameters

        Returns:
            Any: Decoded JSON value

        Raises:
            TransportError: If the request could not be sent or timed out.
            ResponseError: On a non-2xx status or a body that is not JSON.
        """
        self.rate_limiter.wait()

        url = self.url_for(path)
        label = endpoint_label(path)
        logger.debug("Requesting %s params=%s", path, dict(params or {}))

        start_time = time.time()
        try:
            res = requests.get(url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as err:
            api_requests.labels(endpoint=label, status_code="error").inc()
            logger.warning("Request to %s failed: %s", path, str(err))
            raise TransportError(f"GET {path} failed: {err}") from err
        finally:
            api_latency.labels(endpoint=label).observe(time.time() - start_time)

        api_requests.labels(endpoint=label, status_code=str(res.status_code)).inc()

        if not 200 <= res.status_code < 300:
            raise ResponseError(
                f"GET {path} returned HTTP {res.status_code}", status_code=res.status_code
            )

        try:
            return res.json()
        except ValueError as err:
            raise ResponseError(
                f"GET {path} returned a body that is not valid JSON",
                status_code=res.status_code,
            ) from err
