"""Context — the per-invocation record of field values and result slots.

Writes pass through an optional write gate. When the owning class is
restricted, the orchestrator attaches a gate built from the class's
allow-set before any value is stored, so an undeclared write raises
:class:`~servicekit.errors.UndeclaredFieldWrite` and never reaches storage.

Attribute access is sugar over :meth:`Context.get` / :meth:`Context.set`::

    ctx.greeting = "hi"        # same as ctx.set("greeting", "hi")
    ctx.missing                # None, never AttributeError
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from servicekit.errors import UndeclaredFieldWrite

WriteGate = Callable[[str], None]

_SLOTS = frozenset({"_values", "_gate"})


def allow_set_gate(allowed: frozenset[str], owner: str) -> WriteGate:
    """Build a gate that rejects every name outside *allowed*."""

    def gate(name: str) -> None:
        if name not in allowed:
            raise UndeclaredFieldWrite(name, owner)

    return gate


class Context:
    """Mutable mapping of field values owned by one invocation."""

    def __init__(self) -> None:
        object.__setattr__(self, "_values", {})
        object.__setattr__(self, "_gate", None)

    @classmethod
    def build(cls, values: Mapping[str, Any], *, gate: WriteGate | None = None) -> Context:
        """Create a context, attach *gate*, then populate it from *values*."""
        ctx = cls()
        ctx.attach_gate(gate)
        for name, value in values.items():
            ctx.set(name, value)
        return ctx

    def attach_gate(self, gate: WriteGate | None) -> None:
        object.__setattr__(self, "_gate", gate)

    @property
    def restricted(self) -> bool:
        return self._gate is not None

    def set(self, name: str, value: Any) -> None:
        if self._gate is not None:
            self._gate(name)
        self._values[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def is_set(self, name: str) -> bool:
        return name in self._values

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._values.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _SLOTS:
            object.__setattr__(self, name, value)
            return
        self.set(name, value)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"Context({self._values!r})"
