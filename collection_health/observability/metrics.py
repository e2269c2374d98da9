"""Prometheus metrics for collection health checks.

Provides metrics instrumentation for:
- Collection list requests
- Per-collection detail request latency and outcome
- Health breakdown of the latest snapshot
"""

from collections.abc import Iterable
from pathlib import Path

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    write_to_textfile,
)

from collection_health.logging_config import get_logger

logger = get_logger(__name__)

# Listing Metrics
LIST_REQUEST_TOTAL = Counter(
    "collection_list_requests_total",
    "Total collection list requests",
    ["status"],
)

# Detail Metrics
DETAIL_REQUEST_DURATION = Histogram(
    "collection_detail_request_duration_seconds",
    "Collection detail request duration in seconds",
    ["outcome"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

DETAIL_REQUEST_TOTAL = Counter(
    "collection_detail_requests_total",
    "Total collection detail requests",
    ["outcome"],  # "outcome" label values: success, error, timeout
)

# Snapshot Metrics
COLLECTIONS_BY_HEALTH = Gauge(
    "collections_by_health",
    "Collections in the latest snapshot, by health",
    ["health"],  # healthy, degraded, failed
)

COLLECTION_HEALTHY = Gauge(
    "collection_healthy",
    "1 if the collection reported status green in the latest snapshot",
    ["collection"],
)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def track_list_request(success: bool = True) -> None:
    """Track a collection list request.

    Args:
        success: Whether the list was obtained.
    """
    LIST_REQUEST_TOTAL.labels(status="success" if success else "error").inc()


def track_detail_request(outcome: str, duration: float) -> None:
    """Track a collection detail request.

    Args:
        outcome: One of "success", "error", "timeout".
        duration: Request duration in seconds.
    """
    DETAIL_REQUEST_DURATION.labels(outcome=outcome).observe(duration)
    DETAIL_REQUEST_TOTAL.labels(outcome=outcome).inc()


def _label_value(name: str) -> str:
    # Exposition is UTF-8; lone surrogates would make every scrape fail
    return name.encode("utf-8", "backslashreplace").decode("utf-8")


def update_snapshot_metrics(
    healthy: int,
    degraded: int,
    failed: int,
    per_collection: Iterable[tuple[str, bool]] = (),
) -> None:
    """Update the gauges describing the latest snapshot.

    Per-collection gauges from earlier snapshots are always dropped. A name
    listed more than once is healthy only if every occurrence is.

    Args:
        healthy: Collections reporting green.
        degraded: Collections reachable but not green.
        failed: Collections whose details could not be fetched.
        per_collection: (collection name, healthy flag) pairs.
    """
    COLLECTIONS_BY_HEALTH.labels(health="healthy").set(healthy)
    COLLECTIONS_BY_HEALTH.labels(health="degraded").set(degraded)
    COLLECTIONS_BY_HEALTH.labels(health="failed").set(failed)

    merged: dict[str, bool] = {}
    for name, is_healthy in per_collection:
        label = _label_value(name)
        merged[label] = merged.get(label, True) and is_healthy

    COLLECTION_HEALTHY.clear()
    for label, is_healthy in merged.items():
        COLLECTION_HEALTHY.labels(collection=label).set(1 if is_healthy else 0)


def write_metrics_file(path: Path) -> None:
    """Write all metrics in the node-exporter textfile format.

    Args:
        path: Destination file, replaced atomically.
    """
    write_to_textfile(str(path), REGISTRY)
    logger.info(f"Metrics written to {path}")
