"""Outcome — the uniform result of every service invocation.

INVARIANT: ``success`` is True exactly when no validation error was
recorded. ``data`` is populated only when business logic ran.

Declared fields are exposed as attributes::

    outcome = CreateGreeting.call(name="World")
    outcome.success     # True
    outcome.data        # "Hello, World!"
    outcome.greeting    # "Hello, World!"
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from servicekit.domain.errors import ErrorCollection


class Outcome(BaseModel):
    """Frozen snapshot of a finished invocation.

    Attributes:
        service: Dotted name of the service class.
        success: Whether validation passed and business logic ran.
        data: Final result (the business logic's result on success).
        result: Same value as ``data``; kept for callers reading the slot.
        errors: Validation errors on failure, otherwise None.
        error_messages: Full messages on failure, otherwise None.
        fields: Snapshot of every non-base context value.
        meta: Optional metadata (timing).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service: str
    success: bool
    data: Any = None
    result: Any = None
    errors: ErrorCollection | None = None
    error_messages: list[str] | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] | None = None

    @property
    def failure(self) -> bool:
        return not self.success

    @field_serializer("errors")
    def _serialize_errors(self, errors: ErrorCollection | None) -> dict[str, list[str]] | None:
        return errors.to_dict() if errors is not None else None

    def __getattr__(self, name: str) -> Any:
        fields = self.__dict__.get("fields")
        if fields is not None and name in fields:
            return fields[name]
        return super().__getattr__(name)  # type: ignore[misc]

    def to_payload(self) -> dict[str, Any]:
        """Plain-dict form for formatters and job logs."""
        return self.model_dump(mode="python")
