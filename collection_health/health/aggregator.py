"""Fan-out/fan-in aggregation of collection health records."""

import asyncio
import time
from collections.abc import Sequence
from typing import Any

from collection_health.config import CheckSettings, get_settings
from collection_health.endpoint.service import CollectionSource
from collection_health.exceptions import DetailError, ErrorCode, ListError
from collection_health.health.classifier import classify
from collection_health.health.models import (
    CollectionRecord,
    DetailFailed,
    DetailFetched,
    DetailOutcome,
)
from collection_health.logging_config import get_logger
from collection_health.observability.metrics import (
    track_detail_request,
    track_list_request,
)

logger = get_logger(__name__)


class CollectionAggregator:
    """Builds one health record per collection.

    Usage:
        aggregator = CollectionAggregator(source=HTTPCollectionSource())
        records = await aggregator.collect()

    Detail requests run concurrently up to ``max_concurrency`` and each is
    bounded by ``detail_timeout``. Records always come back in the order the
    names were given, one per name, whatever happens to individual requests.
    """

    def __init__(
        self,
        source: CollectionSource,
        settings: CheckSettings | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            source: Collection endpoint to query.
            settings: Concurrency and timeout configuration.
        """
        self._source = source
        self._settings = settings or get_settings().check

    async def collect(self) -> list[CollectionRecord]:
        """List all collections, then aggregate their records.

        Returns:
            Records in the order the service listed the collections.

        Raises:
            ListError: If the collection list cannot be obtained.
        """
        try:
            names = await self._source.list_collections()
        except ListError:
            track_list_request(success=False)
            raise
        track_list_request(success=True)

        logger.info(f"Total collections found: {len(names)}")
        logger.info("Fetching details for each collection...")
        return await self.aggregate(names)

    async def aggregate(self, names: Sequence[str]) -> list[CollectionRecord]:
        """Fetch and classify every named collection.

        Args:
            names: Collection names; duplicates are processed independently.

        Returns:
            One record per name, in input order.
        """
        semaphore = asyncio.Semaphore(self._settings.max_concurrency)

        async def fetch_and_classify(name: str) -> CollectionRecord:
            async with semaphore:
                outcome = await self._fetch(name)
            return classify(name, outcome)

        # gather returns results positionally, so input order is kept
        records = await asyncio.gather(*(fetch_and_classify(n) for n in names))

        failed = sum(1 for record in records if record.failed)
        logger.info(
            f"Aggregated {len(records)} collections",
            extra={
                "healthy": sum(1 for record in records if record.healthy),
                "failed": failed,
            },
        )
        return list(records)

    async def _request(self, name: str) -> dict[str, Any]:
        """Fetch one payload, converting a timeout into DetailError."""
        timeout = self._settings.detail_timeout
        try:
            return await asyncio.wait_for(
                self._source.get_collection_detail(name),
                timeout=timeout,
            )
        except TimeoutError as e:
            raise DetailError(
                name,
                f"Failed to fetch collection details: timed out after {timeout}s",
                code=ErrorCode.DETAIL_TIMEOUT,
                details={"timeout": timeout},
            ) from e

    async def _fetch(self, name: str) -> DetailOutcome:
        """Run one detail request, turning any failure into DetailFailed."""
        start_time = time.perf_counter()

        try:
            payload = await self._request(name)
        except DetailError as e:
            outcome = "timeout" if e.code == ErrorCode.DETAIL_TIMEOUT else "error"
            track_detail_request(outcome, time.perf_counter() - start_time)
            logger.warning(
                f"Collection detail request failed: {name}",
                extra={"collection": name, "code": e.code.value, "error": e.message},
            )
            return DetailFailed(message=e.message)
        except Exception as e:
            # One source bug must not cost the other collections their records
            track_detail_request("error", time.perf_counter() - start_time)
            logger.warning(
                f"Unexpected error fetching collection details: {name}",
                exc_info=True,
                extra={"collection": name, "code": ErrorCode.INTERNAL_ERROR.value},
            )
            return DetailFailed(
                message=f"Failed to fetch collection details: {e.__class__.__name__}: {e}"
            )

        track_detail_request("success", time.perf_counter() - start_time)
        return DetailFetched(payload=payload)
