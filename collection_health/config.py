"""Checker configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env file).
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Backend(str, Enum):
    """How the collection endpoints are reached."""

    HTTP = "http"
    QDRANT = "qdrant"


class QdrantSettings(BaseSettings):
    """Qdrant service connection configuration."""

    model_config = SettingsConfigDict(env_prefix="QDRANT_")

    url: str = Field(
        default="http://localhost:6333",
        description="Base URL of the Qdrant REST API",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Transport timeout per request in seconds",
    )
    backend: Backend = Field(
        default=Backend.HTTP,
        description="Raw REST over httpx, or the qdrant-client library",
    )


class CheckSettings(BaseSettings):
    """Aggregation behaviour for a health check run."""

    model_config = SettingsConfigDict(env_prefix="CHECK_")

    max_concurrency: int = Field(
        default=8,
        ge=1,
        description="Maximum concurrent detail requests (1 = sequential)",
    )
    detail_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on the wait for a single collection's details",
    )
    metrics_file: Path | None = Field(
        default=None,
        description="Write a Prometheus textfile snapshot to this path",
    )


class Settings(BaseSettings):
    """Main settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level",
    )

    # Nested settings
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    check: CheckSettings = Field(default_factory=CheckSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
