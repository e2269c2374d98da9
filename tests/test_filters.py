"""Tests for health filtering and reports."""

import json

import pytest

from collection_health.exceptions import ListError
from collection_health.health.filters import filter_records
from collection_health.health.models import CollectionRecord, HealthFilter
from collection_health.health.report import HealthReport, run_health_check
from collection_health.observability.metrics import get_metrics

from tests.conftest import FakeCollectionSource, detail_payload

RECORDS = [
    CollectionRecord(name="g1", status="green"),
    CollectionRecord(name="y1", status="yellow"),
    CollectionRecord(name="e1", error="Failed to fetch collection details: refused"),
    CollectionRecord(name="g2", status="green"),
    CollectionRecord(name="r1", status="red"),
]


class TestFilterRecords:
    """Tests for filter_records."""

    @pytest.mark.parametrize("mode", [None, HealthFilter.NONE])
    def test_no_filter_is_identity(self, mode: HealthFilter | None) -> None:
        """No filter returns every record in order."""
        assert filter_records(RECORDS, mode) == RECORDS

    def test_healthy_only(self) -> None:
        """Healthy filter keeps green records in order."""
        result = filter_records(RECORDS, HealthFilter.HEALTHY)
        assert [r.name for r in result] == ["g1", "g2"]

    def test_unhealthy_only(self) -> None:
        """Unhealthy filter keeps degraded and failed records in order."""
        result = filter_records(RECORDS, HealthFilter.UNHEALTHY)
        assert [r.name for r in result] == ["y1", "e1", "r1"]

    def test_partition(self) -> None:
        """Healthy and unhealthy filters split the set without overlap."""
        healthy = filter_records(RECORDS, HealthFilter.HEALTHY)
        unhealthy = filter_records(RECORDS, HealthFilter.UNHEALTHY)
        assert len(healthy) + len(unhealthy) == len(RECORDS)
        assert not {r.name for r in healthy} & {r.name for r in unhealthy}

    def test_returns_new_list(self) -> None:
        """Filtering never hands back the caller's list."""
        records = list(RECORDS)
        result = filter_records(records)
        result.pop()
        assert len(records) == len(RECORDS)


class TestHealthReport:
    """Tests for HealthReport."""

    def test_counts(self) -> None:
        """Counts cover the full set regardless of filter."""
        report = HealthReport(records=RECORDS, mode=HealthFilter.HEALTHY)

        assert report.total == 5
        assert report.healthy_count == 2
        assert report.unhealthy_count == 3
        assert report.failed_count == 1
        assert len(report.displayed) == 2

    def test_to_json(self) -> None:
        """JSON output is an array of the fixed record shape."""
        report = HealthReport(records=RECORDS[:3], mode=HealthFilter.UNHEALTHY)

        data = json.loads(report.to_json())

        assert [item["name"] for item in data] == ["y1", "e1"]
        assert set(data[0]) == {
            "name",
            "status",
            "vectors_count",
            "points_count",
            "indexed_vectors_count",
            "vector_config",
            "error",
        }
        assert data[1]["status"] is None


class TestRunHealthCheck:
    """Tests for run_health_check."""

    @pytest.mark.asyncio
    async def test_green_and_yellow_example(self) -> None:
        """Healthy and unhealthy filters pick c1 and c2 respectively."""
        source = FakeCollectionSource(
            names=["c1", "c2"],
            details={
                "c1": detail_payload(vectors_count=1000),
                "c2": detail_payload(status="yellow"),
            },
        )

        healthy = await run_health_check(source, mode=HealthFilter.HEALTHY)
        unhealthy = await run_health_check(source, mode=HealthFilter.UNHEALTHY)

        assert [r.name for r in healthy.displayed] == ["c1"]
        assert healthy.displayed[0].vectors_count == 1000
        assert [r.name for r in unhealthy.displayed] == ["c2"]

    @pytest.mark.asyncio
    async def test_updates_snapshot_metrics(self) -> None:
        """The latest snapshot is exported as gauges."""
        source = FakeCollectionSource(
            names=["m1", "m2"],
            details={"m1": detail_payload()},
        )

        report = await run_health_check(source)

        assert report.mode == HealthFilter.NONE
        metrics = get_metrics().decode()
        assert 'collections_by_health{health="failed"} 1.0' in metrics
        assert 'collection_healthy{collection="m1"} 1.0' in metrics

    @pytest.mark.asyncio
    async def test_list_error_propagates(self) -> None:
        """A failed list aborts the check."""
        source = FakeCollectionSource(
            names=[], details={}, list_error=ListError("down")
        )

        with pytest.raises(ListError):
            await run_health_check(source)
