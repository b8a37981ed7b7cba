"""Service — abstract foundation for all service objects.

A service declares its fields in the class body, implements ``perform()``
for its business logic, and is invoked through the class::

    class CreateGreeting(Service):
        name = Input(str, rules=[Presence()])
        greeting = Output(str)

        def perform(self) -> str:
            self.greeting = f"Hello, {self.name}!"
            return self.greeting

    outcome = CreateGreeting.call(name="World")
    outcome.success   # True
    outcome.data      # "Hello, World!"

Attribute access on a service goes through its context: ``self.result = x``
writes the context (subject to the write gate, so an undeclared name raises
on a restricted class) and reading a name that is not a method or class
attribute returns the context value, or None. ``Input`` fields stay
read-only.

Declarations, validators and callbacks are registered once, in
``__init_subclass__``, under the class's registry lock. The registry is then
sealed; later declarations raise. A new registry is never shared while it is
being built: it is created in ``__init_subclass__`` and only published on
the class once sealed, and parent registries are only read. Classes may
therefore be defined concurrently from several threads.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from servicekit.domain.callbacks import CALL_EVENT, CALLBACK_MARKER, CallbackChain
from servicekit.domain.fields import FieldRegistry, _Field
from servicekit.domain.rules import VALIDATOR_MARKER, MethodRule

if TYPE_CHECKING:
    from servicekit.domain.context import Context
    from servicekit.jobs.models import Job
    from servicekit.services.result import Outcome

# Dotted path -> class, filled as service classes are defined. The async
# adapter resolves queued class names here before trying an import.
SERVICE_INDEX: dict[str, type[Service]] = {}
_index_lock = threading.Lock()


class Service:
    """Base class for service objects. Subclasses implement ``perform()``."""

    _field_registry: ClassVar[FieldRegistry] = FieldRegistry("Service")
    _callback_chain: ClassVar[CallbackChain] = CallbackChain(CALL_EVENT)

    def __init_subclass__(cls, *, restricted: bool | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        bases = [b for b in cls.__bases__ if isinstance(b, type) and issubclass(b, Service)]
        registry = FieldRegistry(
            cls.__qualname__,
            [b.field_registry() for b in bases],
            restricted=restricted,
        )
        chain = CallbackChain(CALL_EVENT, [b.callback_chain() for b in bases])

        with registry.lock:
            for name, attr in cls.__dict__.items():
                if isinstance(attr, _Field):
                    registry.declare(name, attr.role, attr.type, attr.rules)
                    continue
                if getattr(attr, VALIDATOR_MARKER, False):
                    registry.add_rule(MethodRule(name))
                phase = getattr(attr, CALLBACK_MARKER, None)
                if phase is not None:
                    chain.register(phase, name)
            cls._field_registry = registry
            cls._callback_chain = chain
            registry.seal()

        with _index_lock:
            SERVICE_INDEX[cls.service_path()] = cls

    def __init__(self, context: Context) -> None:
        self._context = context

    @property
    def context(self) -> Context:
        return self._context

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._context.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        # Descriptors (Input, Output, properties) handle their own writes.
        if name.startswith("_") or hasattr(getattr(type(self), name, None), "__set__"):
            object.__setattr__(self, name, value)
            return
        self._context.set(name, value)

    def run_routine(self) -> Any:
        """Invoke ``perform()``; a service without one returns None."""
        routine = getattr(self, "perform", None)
        if routine is None:
            return None
        return routine()

    # ------------------------------------------------------------------
    # Class-level API
    # ------------------------------------------------------------------

    @classmethod
    def call(cls, **args: Any) -> Outcome:
        """Validate *args*, run business logic, and return the Outcome."""
        from servicekit.services.orchestrator import Orchestrator

        return Orchestrator(cls).invoke(args)

    @classmethod
    def call_later(
        cls,
        args: Mapping[str, Any] | None = None,
        queue_options: Mapping[str, Any] | None = None,
    ) -> Job:
        """Enqueue this service on the configured job queue.

        *queue_options* accepts ``queue``, ``wait`` and ``at``.
        """
        from servicekit.jobs.adapter import AsyncAdapter

        return AsyncAdapter().enqueue(cls.service_path(), dict(args or {}), dict(queue_options or {}))

    @classmethod
    def service_path(cls) -> str:
        return f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def field_registry(cls) -> FieldRegistry:
        return cls._field_registry

    @classmethod
    def callback_chain(cls) -> CallbackChain:
        return cls._callback_chain

    @classmethod
    def allowed_context_keys(cls) -> frozenset[str]:
        return cls._field_registry.allowed_keys()

    @classmethod
    def restrict_context(cls) -> bool:
        """Whether writes to undeclared context keys raise."""
        return cls._field_registry.restricted

    @classmethod
    def unrestrict_context(cls) -> None:
        """Allow writes to any context key, for this class and its subclasses."""
        cls._field_registry.unrestrict()
