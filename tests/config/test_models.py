"""Tests for config section models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from servicekit.config.models import PluginsConfig, QueueConfig


class TestQueueConfig:
    def test_defaults(self) -> None:
        config = QueueConfig()
        assert config.adapter == "inline"
        assert config.database_path == ".servicekit/jobs.db"
        assert config.sync is False

    def test_unknown_adapter_rejected(self) -> None:
        with pytest.raises(ValidationError):
            QueueConfig(adapter="redis")  # type: ignore[arg-type]

    @pytest.mark.parametrize("field", ["max_attempts", "max_workers"])
    def test_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValidationError, match="must be at least 1"):
            QueueConfig(**{field: 0})


class TestPluginsConfig:
    def test_enabled_by_default(self) -> None:
        assert PluginsConfig().enabled is True
