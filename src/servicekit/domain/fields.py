"""Field declarations and the per-class FieldRegistry.

Each service class owns one :class:`FieldRegistry`, created and filled in
``__init_subclass__`` while the class is being defined, then sealed.
A subclass registry links to its parents' registries, so inherited
declarations are the union of the ancestor chain plus its own. Fields are
never un-declared.

INVARIANT: Registration is guarded by the registry's own lock. Reads after
sealing take no lock. A registry built by ``__init_subclass__`` is private to
that call until it is sealed and published on the class; only the parents
it reads are shared.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from servicekit.domain.rules import FieldRule, Rule, TypeRule, ValueCheck
from servicekit.domain.types import TypeSpec, type_spec

if TYPE_CHECKING:
    from servicekit.services.base import Service

BASE_CONTEXT_KEYS: frozenset[str] = frozenset({"result", "data", "errors", "error_messages"})

# Names an Outcome or a service instance already answers to; a field by
# one of these names would be hidden behind that attribute.
RESERVED_FIELD_NAMES: frozenset[str] = (
    BASE_CONTEXT_KEYS
    | {"service", "success", "failure", "fields", "meta", "to_payload", "context"}
    | {name for name in dir(BaseModel) if not name.startswith("_")}
)


class Role(StrEnum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class FieldDeclaration:
    name: str
    role: Role
    constraint: TypeSpec | None = None


class RegistrySealedError(RuntimeError):
    """Raised when a sealed registry receives a new declaration."""


class ReservedFieldName(ValueError):  # noqa: N818
    """Raised when a declaration uses a name from :data:`RESERVED_FIELD_NAMES`."""


class FieldRegistry:
    """Declared inputs, outputs, type constraints and rules for one class.

    Parameters:
        owner: Display name of the owning class (used in error messages).
        parents: Registries of the owning class's direct bases, in MRO order.
        restricted: Explicit restriction setting, or None to inherit.
    """

    def __init__(
        self,
        owner: str,
        parents: Sequence[FieldRegistry] = (),
        *,
        restricted: bool | None = None,
    ) -> None:
        self.owner = owner
        self._parents = tuple(parents)
        self._declarations: list[FieldDeclaration] = []
        self._rules: list[Rule] = []
        self._restricted = restricted
        self._sealed = False
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def declare(
        self,
        name: str,
        role: Role,
        constraint: Any = None,
        checks: Iterable[ValueCheck] = (),
    ) -> FieldDeclaration:
        """Register *name* under *role*.

        A constraint is normalized to a :data:`TypeSpec` and attached as a
        :class:`TypeRule`, evaluated at validation time. Value checks follow
        it in the order given.
        """
        if name in RESERVED_FIELD_NAMES:
            msg = f"{self.owner}: '{name}' is reserved and cannot be declared as a field"
            raise ReservedFieldName(msg)
        spec = type_spec(constraint) if constraint is not None else None
        declaration = FieldDeclaration(name=name, role=role, constraint=spec)
        with self.lock:
            self._ensure_open()
            self._declarations.append(declaration)
            if spec is not None:
                self._rules.append(TypeRule(name, spec))
            for value_check in checks:
                self._rules.append(FieldRule(name, value_check))
        return declaration

    def add_rule(self, rule: Rule) -> None:
        with self.lock:
            self._ensure_open()
            self._rules.append(rule)

    def seal(self) -> None:
        with self.lock:
            self._sealed = True

    def unrestrict(self) -> None:
        """Turn restriction off for this class and non-overriding subclasses.

        One-way: a registry offers no way back to restricted.
        """
        with self.lock:
            self._restricted = False

    def _ensure_open(self) -> None:
        if self._sealed:
            msg = f"Field registry for {self.owner} is sealed; declare fields in the class body"
            raise RegistrySealedError(msg)

    # ------------------------------------------------------------------
    # Reads (inherited view)
    # ------------------------------------------------------------------

    @property
    def declarations(self) -> list[FieldDeclaration]:
        """Every declaration visible to this class, ancestors first."""
        seen: set[int] = set()
        merged: list[FieldDeclaration] = []
        for registry in self._lineage():
            for declaration in registry._declarations:
                if id(declaration) not in seen:
                    seen.add(id(declaration))
                    merged.append(declaration)
        return merged

    @property
    def inputs(self) -> frozenset[str]:
        return frozenset(d.name for d in self.declarations if d.role is Role.INPUT)

    @property
    def outputs(self) -> frozenset[str]:
        return frozenset(d.name for d in self.declarations if d.role is Role.OUTPUT)

    @property
    def field_names(self) -> list[str]:
        """Declared names in declaration order, without duplicates."""
        return list(dict.fromkeys(d.name for d in self.declarations))

    @property
    def constraints(self) -> dict[str, TypeSpec]:
        """Field -> constraint; a later declaration of the same name wins."""
        return {d.name: d.constraint for d in self.declarations if d.constraint is not None}

    @property
    def rules(self) -> list[Rule]:
        """Every rule visible to this class, ancestors first."""
        seen: set[int] = set()
        merged: list[Rule] = []
        for registry in self._lineage():
            for rule in registry._rules:
                if id(rule) not in seen:
                    seen.add(id(rule))
                    merged.append(rule)
        return merged

    @property
    def restricted(self) -> bool:
        if self._restricted is not None:
            return self._restricted
        if self._parents:
            return self._parents[0].restricted
        return True

    def allowed_keys(self) -> frozenset[str]:
        return self.inputs | self.outputs | BASE_CONTEXT_KEYS

    def _lineage(self) -> list[FieldRegistry]:
        """Ancestor registries (depth-first, parents in order) then self."""
        chain: list[FieldRegistry] = []
        for parent in self._parents:
            for registry in parent._lineage():
                if registry not in chain:
                    chain.append(registry)
        chain.append(self)
        return chain


# ---------------------------------------------------------------------------
# Class-body descriptors
# ---------------------------------------------------------------------------


class _Field:
    role: Role

    def __init__(self, type: Any = None, *, rules: Iterable[ValueCheck] = ()) -> None:  # noqa: A002
        self.type = type
        self.rules = tuple(rules)
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Service | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.context.get(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, type={self.type!r})"


class Input(_Field):
    """A declared input; read-only on the service instance."""

    role = Role.INPUT

    def __set__(self, instance: Service, value: Any) -> None:
        msg = f"Input '{self.name}' is read-only; write it through self.context"
        raise AttributeError(msg)


class Output(_Field):
    """A declared output; writable on the service instance."""

    role = Role.OUTPUT

    def __set__(self, instance: Service, value: Any) -> None:
        instance.context.set(self.name, value)
