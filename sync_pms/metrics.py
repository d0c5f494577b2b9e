"""
Prometheus metrics for the PMS booking sync job.

The sync runs as a batch job, so there is no /metrics endpoint to scrape.
When METRICS_PUSHGATEWAY_URL is configured, the CLI pushes the default
registry to the Pushgateway once the run has finished.

Example:
    >>> from sync_pms.metrics import fetch_failures, records_synced
    >>> fetch_failures.labels(entity_type="booking").inc()
    >>> records_synced.labels(entity_type="booking").inc(12)
"""

from __future__ import annotations

import structlog
from prometheus_client import REGISTRY, Counter, Histogram, push_to_gateway

logger = structlog.get_logger(__name__)

JOB_NAME = "sync_pms"

# =============================================================================
# Sync Metrics
# =============================================================================

sync_runs = Counter(
    "pms_sync_runs_total",
    "Total number of sync runs by outcome",
    ["status"],
)
"""
Counter for sync runs.

Labels:
    status: success, failure (some bookings failed) or error (run aborted)
"""

sync_duration = Histogram(
    "pms_sync_duration_seconds",
    "Duration of a full sync run in seconds",
    buckets=(1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 600.0, 1800.0, float("inf")),
)

records_synced = Counter(
    "pms_records_synced_total",
    "Total number of records written to the database",
    ["entity_type"],
)
"""
Counter for records written.

Labels:
    entity_type: room_type, room, guest or booking
"""

fetch_failures = Counter(
    "pms_fetch_failures_total",
    "Total number of entities that could not be fetched from the PMS",
    ["entity_type"],
)

# =============================================================================
# API Metrics
# =============================================================================

api_requests = Counter(
    "pms_api_requests_total",
    "Total PMS API requests made",
    ["endpoint", "status_code"],
)
"""
Counter for API requests to the PMS.

Labels:
    endpoint: Templated API path (e.g. "/api/bookings/{id}")
    status_code: HTTP status code, or "error" when no response was received
"""

api_latency = Histogram(
    "pms_api_latency_seconds",
    "PMS API request latency in seconds",
    ["endpoint"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)


def push_metrics(gateway_url: str) -> None:
    """
    Push the default registry to a Prometheus Pushgateway.

    A failed push is logged and otherwise ignored: metrics delivery must
    not change the job's exit status.

    Args:
        gateway_url: Pushgateway address (e.g. "pushgateway:9091")
    """
    try:
        push_to_gateway(gateway_url, job=JOB_NAME, registry=REGISTRY)
        logger.debug("metrics_pushed", gateway=gateway_url)
    except OSError as e:
        logger.warning("metrics_push_failed", gateway=gateway_url, error=str(e))
