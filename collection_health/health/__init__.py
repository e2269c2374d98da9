"""Collection health module."""

from collection_health.health.aggregator import CollectionAggregator
from collection_health.health.classifier import classify
from collection_health.health.filters import filter_records
from collection_health.health.models import (
    CollectionRecord,
    DetailFailed,
    DetailFetched,
    DetailOutcome,
    HealthFilter,
    VectorConfig,
)
from collection_health.health.report import HealthReport, run_health_check

__all__ = [
    "CollectionAggregator",
    "CollectionRecord",
    "DetailFailed",
    "DetailFetched",
    "DetailOutcome",
    "HealthFilter",
    "HealthReport",
    "VectorConfig",
    "classify",
    "filter_records",
    "run_health_check",
]
