"""Raised errors for servicekit.

INVARIANT: Validation failures are never raised. They travel inside an
Outcome. Everything here signals misuse (an undeclared write, an
unresolvable class) or a failed background job, and must surface.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from servicekit.domain.errors import ErrorCollection


class ServicekitError(Exception):
    """Base class for every error servicekit raises."""


class UndeclaredFieldWrite(ServicekitError):  # noqa: N818
    """A restricted context received a write to an undeclared name."""

    def __init__(self, name: str, owner: str) -> None:
        self.name = name
        self.owner = owner
        super().__init__(
            f"Cannot set '{name}' on {owner} context. "
            f"Declare it with Input() or Output()"
        )


class UnresolvedClass(ServicekitError):  # noqa: N818
    """A queued class name did not resolve to a service class."""

    def __init__(self, class_name: str, args: dict[str, Any]) -> None:
        self.class_name = class_name
        self.arguments = args
        super().__init__(f"Failed to resolve service class: {class_name}, arguments: {args}")


class AsyncExecutionFailure(ServicekitError):  # noqa: N818
    """A service run from the job queue returned a failing Outcome."""

    def __init__(self, class_name: str, errors: ErrorCollection | None, args: dict[str, Any]) -> None:
        self.class_name = class_name
        self.errors = errors
        self.arguments = args
        detail = errors.to_dict() if errors is not None else {}
        super().__init__(f"Service {class_name} failed with errors: {detail}, arguments: {args}")


class CallbackContractError(ServicekitError):
    """An around callback did not invoke its continuation exactly once."""

    def __init__(self, handler: str, calls: int) -> None:
        self.handler = handler
        self.calls = calls
        super().__init__(
            f"Around callback {handler} must call its continuation exactly once (called {calls} times)"
        )
