"""Collection endpoint module."""

from collection_health.endpoint.service import (
    CollectionSource,
    HTTPCollectionSource,
    QdrantCollectionSource,
    create_source,
)

__all__ = [
    "CollectionSource",
    "HTTPCollectionSource",
    "QdrantCollectionSource",
    "create_source",
]
