"""Collection health data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

HEALTHY_STATUS = "green"


class HealthFilter(str, Enum):
    """Which records a report should display."""

    NONE = "none"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class VectorConfig(BaseModel):
    """Dimensionality and distance metric of a collection's vectors.

    Attributes:
        size: Vector dimensionality.
        distance: Metric name as reported by the service (not validated).
    """

    model_config = ConfigDict(frozen=True)

    size: int = Field(gt=0, description="Vector dimensionality")
    distance: str = Field(description="Distance metric name")


class DetailFetched(BaseModel):
    """The detail payload of a collection was retrieved."""

    model_config = ConfigDict(frozen=True)

    payload: dict[str, Any] = Field(description="The 'result' object of the response")


class DetailFailed(BaseModel):
    """The detail payload of a collection could not be retrieved."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(description="Human-readable failure description")


DetailOutcome = DetailFetched | DetailFailed


class CollectionRecord(BaseModel):
    """Health record for one collection.

    Either ``status`` is set and ``error`` is not, or ``error`` is set and
    every other field is absent.

    Attributes:
        name: Collection name.
        status: Status token reported by the service (e.g. "green").
        vectors_count: Number of vectors, when reported.
        points_count: Number of points, when reported.
        indexed_vectors_count: Number of indexed vectors, when reported.
        vector_config: Vector size and distance, when readable.
        error: Why the details could not be obtained.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Collection name")
    status: str | None = Field(default=None, description="Reported status token")
    vectors_count: int | None = Field(default=None, ge=0)
    points_count: int | None = Field(default=None, ge=0)
    indexed_vectors_count: int | None = Field(default=None, ge=0)
    vector_config: VectorConfig | None = Field(default=None)
    error: str | None = Field(default=None, description="Failure description")

    @model_validator(mode="after")
    def _status_xor_error(self) -> "CollectionRecord":
        if (self.status is None) == (self.error is None):
            raise ValueError("exactly one of status and error must be set")
        if self.error is not None and (
            self.vectors_count is not None
            or self.points_count is not None
            or self.indexed_vectors_count is not None
            or self.vector_config is not None
        ):
            raise ValueError("an errored record carries no collection details")
        return self

    @property
    def healthy(self) -> bool:
        """Whether the collection reported status green."""
        return self.error is None and self.status == HEALTHY_STATUS

    @property
    def failed(self) -> bool:
        """Whether the details could not be fetched at all."""
        return self.error is not None

    def to_report_dict(self) -> dict[str, Any]:
        """Render the fixed JSON shape used in reports, absent fields as null."""
        return {
            "name": self.name,
            "status": self.status,
            "vectors_count": self.vectors_count,
            "points_count": self.points_count,
            "indexed_vectors_count": self.indexed_vectors_count,
            "vector_config": (
                self.vector_config.model_dump() if self.vector_config else None
            ),
            "error": self.error,
        }
