"""Observability module."""

from collection_health.observability.metrics import (
    get_metrics,
    track_detail_request,
    track_list_request,
    update_snapshot_metrics,
    write_metrics_file,
)

__all__ = [
    "get_metrics",
    "track_detail_request",
    "track_list_request",
    "update_snapshot_metrics",
    "write_metrics_file",
]
