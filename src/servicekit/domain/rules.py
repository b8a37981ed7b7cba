"""Validation rules run before business logic.

Three kinds of rule share one ordered list per service class:

- :class:`FieldRule` binds a value check (:class:`Presence`, :class:`Length`,
  :class:`Inclusion`, :class:`Format`) to a declared field.
- :class:`TypeRule` evaluates a declared type constraint lazily, against
  whatever the context holds at validation time.
- :class:`MethodRule` calls an object-level ``@validator`` method.

Every rule appends to the shared :class:`ErrorCollection` and never raises
for invalid data.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection, Sized
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from servicekit.domain.types import Invalid, TypeSpec, check

if TYPE_CHECKING:
    from servicekit.domain.context import Context
    from servicekit.domain.errors import ErrorCollection


class ValueCheck(Protocol):
    """A check over a single value. Returns a message, or None when valid."""

    def __call__(self, value: Any) -> str | None: ...


class Rule(Protocol):
    """Anything the validation engine can run."""

    def apply(self, context: Context, errors: ErrorCollection, subject: Any) -> None: ...


# ---------------------------------------------------------------------------
# Value checks
# ---------------------------------------------------------------------------


def is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class Presence:
    message: str = "can't be blank"

    def __call__(self, value: Any) -> str | None:
        return self.message if is_blank(value) else None


@dataclass(frozen=True)
class Length:
    """Size bounds; ``None`` values are skipped (combine with Presence)."""

    minimum: int | None = None
    maximum: int | None = None

    def __call__(self, value: Any) -> str | None:
        if value is None:
            return None
        size = len(value)
        if self.minimum is not None and size < self.minimum:
            return f"is too short (minimum is {self.minimum} characters)"
        if self.maximum is not None and size > self.maximum:
            return f"is too long (maximum is {self.maximum} characters)"
        return None


@dataclass(frozen=True)
class Inclusion:
    choices: Collection[Any]
    message: str = "is not included in the list"

    def __call__(self, value: Any) -> str | None:
        if value is None or value in self.choices:
            return None
        return self.message


@dataclass(frozen=True)
class Format:
    pattern: str
    message: str = "is invalid"

    def __call__(self, value: Any) -> str | None:
        if value is None:
            return None
        if re.search(self.pattern, str(value)) is None:
            return self.message
        return None


# ---------------------------------------------------------------------------
# Bound rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldRule:
    name: str
    check: ValueCheck

    def apply(self, context: Context, errors: ErrorCollection, subject: Any) -> None:
        message = self.check(context.get(self.name))
        if message:
            errors.add(self.name, message)


@dataclass(frozen=True)
class TypeRule:
    name: str
    spec: TypeSpec

    def apply(self, context: Context, errors: ErrorCollection, subject: Any) -> None:
        outcome = check(context.get(self.name), self.spec)
        if isinstance(outcome, Invalid):
            errors.add(self.name, outcome.message)


@dataclass(frozen=True)
class MethodRule:
    """Calls ``subject.<method_name>(errors)``.

    Looked up by name at run time, so subclasses can override it.
    """

    method_name: str

    def apply(self, context: Context, errors: ErrorCollection, subject: Any) -> None:
        getattr(subject, self.method_name)(errors)


_F = TypeVar("_F", bound=Callable[..., Any])

VALIDATOR_MARKER = "__servicekit_validator__"


def validator(func: _F) -> _F:
    """Mark a method as an object-level validation rule.

    The method receives the :class:`ErrorCollection` and adds to it::

        @validator
        def ends_after_start(self, errors):
            if self.ends_at < self.starts_at:
                errors.add("ends_at", "must be after starts_at")
    """
    setattr(func, VALIDATOR_MARKER, True)
    return func
