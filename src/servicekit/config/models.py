"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, servicekit.toml only contains
overrides. An empty file (or none at all) gives an inline queue.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator


class QueueConfig(BaseModel):
    """[queue] section."""

    model_config = {"frozen": True}

    adapter: Literal["inline", "test", "database"] = "inline"
    database_path: str = ".servicekit/jobs.db"
    default_queue: str = "default"
    max_attempts: int = 3
    max_workers: int = 2
    sync: bool = False

    @field_validator("max_attempts", "max_workers")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            msg = "must be at least 1"
            raise ValueError(msg)
        return v


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True

