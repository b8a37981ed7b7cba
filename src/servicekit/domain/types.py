"""Type specifications for declared fields and the checker that evaluates them.

A declared ``type=`` is normalized once, at declaration time, into one of
three closed variants:

- :class:`ExactType`: a plain class; subclasses match.
- :class:`UnionType`: an ordered set of plain classes (``[str, date]``,
  ``(str, date)`` or ``str | date``).
- :class:`RichType`: any other typing construct (``list[str]``,
  ``Annotated[int, Field(ge=0)]``, ``Literal["a", "b"]``...), validated by a
  pydantic ``TypeAdapter``.

:func:`check` never coerces. A rich type that *would* coerce (``"5"`` for
``int`` in lax mode) accepts the value, and the caller keeps the original.

INVARIANT: ``None`` always passes. Required-ness is a separate rule.
"""

from __future__ import annotations

import types
from dataclasses import dataclass, field
from typing import Any, Union, get_args, get_origin

from pydantic import TypeAdapter, ValidationError


@dataclass(frozen=True)
class ExactType:
    """A single plain class."""

    type_: type

    @property
    def description(self) -> str:
        return self.type_.__name__


@dataclass(frozen=True)
class UnionType:
    """Any of several plain classes, in declaration order."""

    members: tuple[ExactType, ...]

    @property
    def description(self) -> str:
        return " or ".join(m.description for m in self.members)


@dataclass(frozen=True)
class RichType:
    """A typing construct validated by pydantic.

    ``description`` overrides the rendering used in error messages.
    """

    descriptor: Any
    description_override: str | None = None
    adapter: TypeAdapter[Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "adapter", TypeAdapter(self.descriptor))

    @property
    def description(self) -> str:
        if self.description_override:
            return self.description_override
        return describe(self.descriptor)


TypeSpec = ExactType | UnionType | RichType


@dataclass(frozen=True)
class Valid:
    """Outcome of a passing check."""


@dataclass(frozen=True)
class Invalid:
    """Outcome of a failing check, with its rendered message."""

    message: str


CheckResult = Valid | Invalid

VALID = Valid()


def describe(descriptor: Any) -> str:
    """Render a typing construct the way it reads in source."""
    if isinstance(descriptor, type) and get_origin(descriptor) is None:
        return descriptor.__name__
    return repr(descriptor).replace("typing.", "")


def _is_plain_class(candidate: Any) -> bool:
    return isinstance(candidate, type) and get_origin(candidate) is None


def type_spec(declared: Any) -> TypeSpec:
    """Normalize a declared ``type=`` value into a :data:`TypeSpec`.

    Already-normalized specs pass through unchanged.

    Raises:
        TypeError: If a list/tuple union contains something other than a class.
    """
    if isinstance(declared, (ExactType, UnionType, RichType)):
        return declared

    if isinstance(declared, (list, tuple)):
        if not declared or not all(_is_plain_class(t) for t in declared):
            msg = f"Union type must be a non-empty sequence of classes, got {declared!r}"
            raise TypeError(msg)
        return UnionType(tuple(ExactType(t) for t in declared))

    if get_origin(declared) in (types.UnionType, Union):
        members = get_args(declared)
        if all(_is_plain_class(t) for t in members):
            return UnionType(tuple(ExactType(t) for t in members))
        return RichType(declared)

    if _is_plain_class(declared):
        return ExactType(declared)

    return RichType(declared)


def check(value: Any, spec: TypeSpec) -> CheckResult:
    """Evaluate *value* against *spec*."""
    if value is None:
        return VALID

    match spec:
        case ExactType(type_=expected):
            if isinstance(value, expected):
                return VALID
            return Invalid(f"must be a {spec.description}")
        case UnionType(members=members):
            if any(isinstance(value, m.type_) for m in members):
                return VALID
            return Invalid(f"must be a {spec.description}")
        case RichType():
            return _check_rich(value, spec)

    msg = f"Unsupported type specification: {spec!r}"
    raise TypeError(msg)


def _check_rich(value: Any, spec: RichType) -> CheckResult:
    try:
        spec.adapter.validate_python(value)
    except ValidationError as exc:
        diagnostic = "; ".join(err["msg"] for err in exc.errors())
        if diagnostic:
            return Invalid(f"must be a {spec.description} ({diagnostic})")
        return Invalid(f"must be a {spec.description}")
    except (TypeError, ValueError):
        return Invalid(f"must be a {spec.description}")
    return VALID
