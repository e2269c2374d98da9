"""Pytest configuration and shared fixtures."""

import asyncio
from collections.abc import Iterator
from typing import Any

import pytest

from collection_health.config import get_settings
from collection_health.endpoint.service import CollectionSource
from collection_health.exceptions import DetailError, ListError


def detail_payload(
    status: str = "green",
    vectors_count: int | None = 1000,
    size: int = 384,
    distance: str = "Cosine",
    **extra: Any,
) -> dict[str, Any]:
    """Build a detail payload shaped like Qdrant's collection info."""
    payload: dict[str, Any] = {
        "status": status,
        "optimizer_status": "ok",
        "vectors_count": vectors_count,
        "indexed_vectors_count": 0,
        "points_count": 1000,
        "segments_count": 2,
        "config": {
            "params": {
                "vectors": {"size": size, "distance": distance},
                "shard_number": 1,
            }
        },
    }
    payload.update(extra)
    return payload


class FakeCollectionSource(CollectionSource):
    """In-memory collection source.

    ``details`` maps a name to a payload, an exception to raise, or a
    ``(delay_seconds, payload)`` tuple.
    """

    def __init__(
        self,
        names: list[str],
        details: dict[str, Any],
        list_error: ListError | None = None,
    ) -> None:
        self.names = names
        self.details = details
        self.list_error = list_error
        self.detail_calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def list_collections(self) -> list[str]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.names)

    async def get_collection_detail(self, name: str) -> dict[str, Any]:
        self.detail_calls.append(name)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            detail = self.details.get(name)
            if isinstance(detail, tuple):
                delay, detail = detail
                await asyncio.sleep(delay)
            if isinstance(detail, Exception):
                raise detail
            if detail is None:
                raise DetailError(
                    name, "Failed to get collection details (status: 404)"
                )
            return detail
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Reset cached settings between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
