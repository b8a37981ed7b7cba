"""Job payloads exchanged with the job-queue collaborator.

The wire contract is ``(class_name, args)``: the dotted path of a service
class and the keyword arguments to call it with. Queue options (``queue``,
``wait``, ``at``) ride alongside and are kept verbatim on the job.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_QUEUE = "default"


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_iso(moment: datetime | None) -> str | None:
    """UTC ISO 8601, comparable as text. Naive datetimes are taken as UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat()


class JobStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"


class QueueOptions(BaseModel):
    """Options accepted by ``call_later``; unknown keys are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    queue: str | None = None
    wait: timedelta | None = None
    at: datetime | None = None

    @field_validator("wait", mode="before")
    @classmethod
    def _seconds_to_timedelta(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return timedelta(seconds=value)
        return value

    def scheduled_at(self, now: datetime | None = None) -> datetime | None:
        """``at`` wins over ``wait``; neither means due immediately."""
        if self.at is not None:
            return self.at
        if self.wait is not None:
            return (now or utc_now()) + self.wait
        return None


class Job(BaseModel):
    """A queued service invocation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    class_name: str
    args: dict[str, Any] = Field(default_factory=dict)
    queue: str = DEFAULT_QUEUE
    options: dict[str, Any] = Field(default_factory=dict)
    scheduled_at: datetime | None = None
    enqueued_at: datetime = Field(default_factory=utc_now)
    status: JobStatus = JobStatus.PENDING
    attempts: int = 0
    error: str | None = None

    @classmethod
    def create(
        cls,
        class_name: str,
        args: dict[str, Any],
        queue_options: dict[str, Any] | None = None,
        *,
        default_queue: str = DEFAULT_QUEUE,
    ) -> Job:
        options = QueueOptions.model_validate(queue_options or {})
        return cls(
            class_name=class_name,
            args=dict(args),
            queue=options.queue or default_queue,
            options=dict(queue_options or {}),
            scheduled_at=options.scheduled_at(),
        )

    @property
    def payload(self) -> tuple[str, dict[str, Any]]:
        """The ``(class_name, args)`` pair handed to the executor."""
        return self.class_name, self.args
