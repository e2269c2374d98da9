"""Collection endpoint interface and implementations."""

from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

import httpx
from qdrant_client import AsyncQdrantClient
from qdrant_client.http.exceptions import UnexpectedResponse

from collection_health.config import Backend, QdrantSettings, get_settings
from collection_health.exceptions import DetailError, ErrorCode, ListError
from collection_health.logging_config import get_logger

logger = get_logger(__name__)


def _describe(error: Exception) -> str:
    # httpx timeouts often carry an empty message
    return str(error) or error.__class__.__name__


class CollectionSource(ABC):
    """Abstract base class for collection endpoints.

    Defines the two read operations a health check needs.
    """

    @abstractmethod
    async def list_collections(self) -> list[str]:
        """List the names of all collections.

        Returns:
            Collection names in the order the service reports them.

        Raises:
            ListError: If the list cannot be obtained.
        """
        ...

    @abstractmethod
    async def get_collection_detail(self, name: str) -> dict[str, Any]:
        """Fetch the detail payload of one collection.

        Args:
            name: Collection name.

        Returns:
            The collection's detail payload, containing at least ``status``.

        Raises:
            DetailError: If the details cannot be obtained.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying transport."""
        ...


class HTTPCollectionSource(CollectionSource):
    """Collection endpoint using the Qdrant REST API directly.

    Endpoints:
    - GET <base>/collections
    - GET <base>/collections/<name>
    """

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the REST collection source.

        Args:
            settings: Qdrant connection configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def base_url(self) -> str:
        """Base URL without a trailing slash."""
        return self._settings.url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {}
        if self._settings.api_key:
            headers["api-key"] = self._settings.api_key.get_secret_value()
        return headers

    async def list_collections(self) -> list[str]:
        """List collection names from ``result.collections[].name``."""
        client = await self._get_client()
        url = f"{self.base_url}/collections"

        try:
            response = await client.get(url, headers=self._headers())
            logger.info(f"Response status: {response.status_code}", extra={"url": url})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(
                f"Collection list request failed: {status}",
                extra={"url": url, "status": status},
            )
            raise ListError(
                f"Collection list request returned {status}",
                status_code=status,
                details={"url": url},
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Collection list request error: {e}", extra={"url": url})
            raise ListError(
                f"Failed to connect to collection endpoint: {_describe(e)}",
                details={"url": url},
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ListError(
                f"Invalid JSON from collection endpoint: {e}",
                status_code=response.status_code,
                code=ErrorCode.LIST_BAD_RESPONSE,
                details={"url": url},
            ) from e

        result = body.get("result") if isinstance(body, dict) else None
        entries = result.get("collections") if isinstance(result, dict) else None
        if not isinstance(entries, list):
            raise ListError(
                "Expected 'result.collections' to be an array",
                status_code=response.status_code,
                code=ErrorCode.LIST_BAD_RESPONSE,
                details={"url": url},
            )

        names: list[str] = []
        for entry in entries:
            name = entry.get("name") if isinstance(entry, dict) else None
            if isinstance(name, str):
                names.append(name)
            else:
                logger.warning(
                    "Skipping collection entry without a name",
                    extra={"entry": entry},
                )

        logger.debug(f"Listed {len(names)} collections", extra={"url": url})
        return names

    async def get_collection_detail(self, name: str) -> dict[str, Any]:
        """Fetch the ``result`` object for one collection."""
        client = await self._get_client()
        url = f"{self.base_url}/collections"

        try:
            url = f"{url}/{quote(name, safe='')}"
            response = await client.get(url, headers=self._headers())
            response.raise_for_status()
        except UnicodeEncodeError as e:
            # JSON admits lone surrogates that UTF-8 cannot carry in a URL
            raise DetailError(
                name,
                f"Failed to fetch collection details: name cannot be encoded ({e.reason})",
                details={"url": url},
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise DetailError(
                name,
                f"Failed to get collection details (status: {status})",
                details={"status_code": status},
            ) from e
        except httpx.RequestError as e:
            raise DetailError(
                name,
                f"Failed to fetch collection details: {_describe(e)}",
                details={"url": url},
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise DetailError(
                name,
                f"Error parsing collection details: {e}",
                code=ErrorCode.DETAIL_BAD_RESPONSE,
            ) from e

        result = body.get("result") if isinstance(body, dict) else None
        if not isinstance(result, dict) or not isinstance(result.get("status"), str):
            raise DetailError(
                name,
                "Error parsing collection details: unexpected response shape",
                code=ErrorCode.DETAIL_BAD_RESPONSE,
            )
        return result


class QdrantCollectionSource(CollectionSource):
    """Collection endpoint backed by the qdrant-client library."""

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize the qdrant-client collection source.

        Args:
            settings: Qdrant connection configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> AsyncQdrantClient:
        """Get or create Qdrant client."""
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value()

            self._client = AsyncQdrantClient(
                url=self._settings.url,
                api_key=api_key,
                timeout=max(1, int(self._settings.timeout)),
            )
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def list_collections(self) -> list[str]:
        """List collection names."""
        client = await self._get_client()

        try:
            response = await client.get_collections()
        except UnexpectedResponse as e:
            raise ListError(
                f"Collection list request returned {e.status_code}",
                status_code=e.status_code,
            ) from e
        except Exception as e:
            raise ListError(f"Failed to list collections: {e}") from e

        return [collection.name for collection in response.collections]

    async def get_collection_detail(self, name: str) -> dict[str, Any]:
        """Fetch one collection's info as a plain payload."""
        client = await self._get_client()

        try:
            info = await client.get_collection(name)
        except UnexpectedResponse as e:
            raise DetailError(
                name,
                f"Failed to get collection details (status: {e.status_code})",
                details={"status_code": e.status_code},
            ) from e
        except Exception as e:
            raise DetailError(
                name,
                f"Failed to fetch collection details: {_describe(e)}",
            ) from e

        return info.model_dump(mode="json")


def create_source(settings: QdrantSettings | None = None) -> CollectionSource:
    """Create the collection source selected by ``settings.backend``.

    Args:
        settings: Qdrant connection configuration.

    Returns:
        An unopened collection source; the transport is created lazily.
    """
    settings = settings or get_settings().qdrant
    if settings.backend == Backend.QDRANT:
        return QdrantCollectionSource(settings=settings)
    return HTTPCollectionSource(settings=settings)
