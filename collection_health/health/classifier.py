"""Map a collection detail outcome to a health record."""

from typing import Any

from pydantic import ValidationError

from collection_health.health.models import (
    CollectionRecord,
    DetailFailed,
    DetailOutcome,
    VectorConfig,
)
from collection_health.logging_config import get_logger

logger = get_logger(__name__)

_COUNT_FIELDS = ("vectors_count", "points_count", "indexed_vectors_count")


def classify(name: str, outcome: DetailOutcome) -> CollectionRecord:
    """Build the health record for one collection.

    A failed fetch yields a record carrying only the error. A fetched payload
    has its status, counts and vector configuration copied through; counts
    and configuration that cannot be read are left absent rather than
    turning the record into an error.

    Args:
        name: Collection name.
        outcome: Result of the detail request.

    Returns:
        The collection's record.
    """
    if isinstance(outcome, DetailFailed):
        return CollectionRecord(name=name, error=outcome.message)

    payload = outcome.payload
    status = payload.get("status")
    if not isinstance(status, str):
        return CollectionRecord(
            name=name,
            error="Error parsing collection details: no status reported",
        )

    counts = {field: _count(payload.get(field)) for field in _COUNT_FIELDS}

    return CollectionRecord(
        name=name,
        status=status,
        vector_config=_vector_config(name, payload),
        **counts,
    )


def _count(value: Any) -> int | None:
    # bool is an int subclass but never a count
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return None


def _vector_config(name: str, payload: dict[str, Any]) -> VectorConfig | None:
    """Read ``config.params.vectors`` as a single unnamed vector space."""
    config = payload.get("config")
    params = config.get("params") if isinstance(config, dict) else None
    vectors = params.get("vectors") if isinstance(params, dict) else None
    if not isinstance(vectors, dict):
        return None

    try:
        return VectorConfig.model_validate(
            {"size": vectors.get("size"), "distance": vectors.get("distance")},
            strict=True,
        )
    except ValidationError:
        logger.debug(
            f"Unreadable vector config for collection: {name}",
            extra={"collection": name},
        )
        return None
