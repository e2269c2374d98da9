"""Health filtering over aggregated records."""

from collections.abc import Sequence

from collection_health.health.models import CollectionRecord, HealthFilter


def filter_records(
    records: Sequence[CollectionRecord],
    mode: HealthFilter | None = None,
) -> list[CollectionRecord]:
    """Select records by health, keeping their relative order.

    Args:
        records: Aggregated records.
        mode: HEALTHY keeps green collections, UNHEALTHY keeps everything
            else (degraded and failed alike), NONE or None keeps all.

    Returns:
        The retained records.
    """
    if mode is None or mode == HealthFilter.NONE:
        return list(records)
    if mode == HealthFilter.HEALTHY:
        return [record for record in records if record.healthy]
    return [record for record in records if not record.healthy]
