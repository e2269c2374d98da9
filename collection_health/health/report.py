"""Health report assembly."""

import json

from pydantic import BaseModel, ConfigDict, Field

from collection_health.config import CheckSettings
from collection_health.endpoint.service import CollectionSource
from collection_health.health.aggregator import CollectionAggregator
from collection_health.health.filters import filter_records
from collection_health.health.models import CollectionRecord, HealthFilter
from collection_health.observability.metrics import update_snapshot_metrics


class HealthReport(BaseModel):
    """Point-in-time health snapshot of all collections.

    Attributes:
        records: Every aggregated record, in list order.
        mode: Filter applied to produce the displayed records.
    """

    model_config = ConfigDict(frozen=True)

    records: list[CollectionRecord] = Field(description="All records")
    mode: HealthFilter = Field(default=HealthFilter.NONE, description="Display filter")

    @property
    def displayed(self) -> list[CollectionRecord]:
        """Records retained by the filter."""
        return filter_records(self.records, self.mode)

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def healthy_count(self) -> int:
        return sum(1 for record in self.records if record.healthy)

    @property
    def failed_count(self) -> int:
        return sum(1 for record in self.records if record.failed)

    @property
    def unhealthy_count(self) -> int:
        return self.total - self.healthy_count

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize the displayed records as a JSON array."""
        return json.dumps(
            [record.to_report_dict() for record in self.displayed],
            indent=indent,
        )


async def run_health_check(
    source: CollectionSource,
    settings: CheckSettings | None = None,
    mode: HealthFilter | None = None,
) -> HealthReport:
    """Collect every collection's record and wrap them in a report.

    Args:
        source: Collection endpoint to query.
        settings: Concurrency and timeout configuration.
        mode: Display filter (None shows everything).

    Returns:
        The health report.

    Raises:
        ListError: If the collection list cannot be obtained.
    """
    aggregator = CollectionAggregator(source=source, settings=settings)
    records = await aggregator.collect()

    report = HealthReport(records=records, mode=mode or HealthFilter.NONE)
    update_snapshot_metrics(
        healthy=report.healthy_count,
        degraded=report.unhealthy_count - report.failed_count,
        failed=report.failed_count,
        per_collection=[(record.name, record.healthy) for record in records],
    )
    return report
