"""Tests for checker configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from collection_health.config import (
    Backend,
    CheckSettings,
    Environment,
    QdrantSettings,
    Settings,
    get_settings,
)


class TestQdrantSettings:
    """Tests for Qdrant connection configuration."""

    def test_default_values(self) -> None:
        """Defaults point to a local Qdrant over REST."""
        settings = QdrantSettings()
        assert settings.url == "http://localhost:6333"
        assert settings.api_key is None
        assert settings.timeout == 10.0
        assert settings.backend == Backend.HTTP

    def test_api_key_is_secret_when_set(self) -> None:
        """API key should be masked when set."""
        with patch.dict(os.environ, {"QDRANT_API_KEY": "secret-key"}):
            settings = QdrantSettings()
            assert settings.api_key is not None
            assert "secret-key" not in str(settings.api_key)
            assert settings.api_key.get_secret_value() == "secret-key"

    def test_backend_from_env(self) -> None:
        """Backend can be selected via environment."""
        with patch.dict(os.environ, {"QDRANT_BACKEND": "qdrant"}):
            settings = QdrantSettings()
            assert settings.backend == Backend.QDRANT

    def test_timeout_must_be_positive(self) -> None:
        """Zero timeout is rejected."""
        with pytest.raises(ValidationError):
            QdrantSettings(timeout=0)


class TestCheckSettings:
    """Tests for aggregation configuration."""

    def test_default_values(self) -> None:
        """Default concurrency and timeout."""
        settings = CheckSettings()
        assert settings.max_concurrency == 8
        assert settings.detail_timeout == 30.0
        assert settings.metrics_file is None

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(
            os.environ,
            {"CHECK_MAX_CONCURRENCY": "1", "CHECK_METRICS_FILE": "/tmp/q.prom"},
        ):
            settings = CheckSettings()
            assert settings.max_concurrency == 1
            assert settings.metrics_file == Path("/tmp/q.prom")

    def test_concurrency_at_least_one(self) -> None:
        """Concurrency below one is rejected."""
        with pytest.raises(ValidationError):
            CheckSettings(max_concurrency=0)


class TestSettings:
    """Tests for main settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings()
        assert isinstance(settings.qdrant, QdrantSettings)
        assert isinstance(settings.check, CheckSettings)

    def test_environment_enum(self) -> None:
        """Environment can be set via string."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            settings = Settings()
            assert settings.environment == Environment.PRODUCTION


class TestGetSettings:
    """Tests for settings singleton."""

    def test_caching(self) -> None:
        """Settings are cached."""
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
