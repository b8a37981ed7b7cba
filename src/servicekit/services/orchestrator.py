"""Orchestrator — the call wrapper around every service invocation.

One orchestrator runs one invocation and owns its Context::

    BUILT -> RESTRICTING -> VALIDATING -> FAILED
                                       -> EXECUTING_CALLBACKS -> INVOKED -> FINALIZED

- BUILT: the context is populated from caller arguments. When the class is
  restricted, an unknown key raises ``UndeclaredFieldWrite`` here, outside
  the validation channel.
- RESTRICTING: the write gate stays attached for the rest of the run.
- VALIDATING: collect-all validation. Any error ends in FAILED, and neither
  callbacks nor business logic run.
- EXECUTING_CALLBACKS: the callback chain runs with ``perform()`` at its
  core. The routine's return value becomes ``result`` only when nothing
  set ``result`` first (an explicit assignment wins).
- FINALIZED: ``data`` mirrors ``result`` and the Outcome is produced.

No retries happen here. Exceptions from business logic or callbacks
propagate to the caller unchanged.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from servicekit.domain.context import Context, allow_set_gate
from servicekit.domain.fields import BASE_CONTEXT_KEYS
from servicekit.domain.validation import ValidationEngine, default_engine
from servicekit.services.result import Outcome

if TYPE_CHECKING:
    from servicekit.domain.errors import ErrorCollection
    from servicekit.services.base import Service

log = structlog.get_logger(__name__)
logger = logging.getLogger(__name__)


class State(StrEnum):
    PENDING = "pending"
    BUILT = "built"
    RESTRICTING = "restricting"
    VALIDATING = "validating"
    FAILED = "failed"
    EXECUTING_CALLBACKS = "executing_callbacks"
    INVOKED = "invoked"
    FINALIZED = "finalized"


class Orchestrator:
    """Runs a single invocation of *service_cls*."""

    def __init__(self, service_cls: type[Service], *, engine: ValidationEngine | None = None) -> None:
        self.service_cls = service_cls
        self.state = State.PENDING
        self.context: Context | None = None
        self._engine = engine or default_engine

    def invoke(self, args: Mapping[str, Any]) -> Outcome:
        if self.state is not State.PENDING:
            msg = f"Orchestrator for {self.service_cls.__qualname__} already ran"
            raise RuntimeError(msg)

        started = time.perf_counter()
        cls = self.service_cls
        registry = cls.field_registry()

        gate = None
        if registry.restricted:
            gate = allow_set_gate(registry.allowed_keys(), cls.__qualname__)

        context = Context.build(args, gate=gate)
        self.context = context
        self.state = State.BUILT

        self.state = State.RESTRICTING
        service = cls(context)

        self.state = State.VALIDATING
        errors = self._engine.validate(context, registry.rules, subject=service)

        if errors:
            self.state = State.FAILED
            outcome = self._fail(context, errors, started)
        else:
            self.state = State.EXECUTING_CALLBACKS
            returned = cls.callback_chain().run(service, service.run_routine)
            if context.get("result") is None:
                context.set("result", returned)
            self.state = State.INVOKED
            outcome = self._finalize(context, started)
            self.state = State.FINALIZED

        if logger.isEnabledFor(logging.DEBUG):
            log.debug(
                "service.call",
                service=outcome.service,
                success=outcome.success,
                state=str(self.state),
                duration_ms=outcome.meta["duration_ms"] if outcome.meta else None,
            )
        return outcome

    # ------------------------------------------------------------------
    # Outcome assembly
    # ------------------------------------------------------------------

    def _finalize(self, context: Context, started: float) -> Outcome:
        result = context.get("result")
        context.set("data", result)
        return Outcome(
            service=self.service_cls.service_path(),
            success=True,
            data=result,
            result=result,
            fields=_snapshot(context, self.service_cls),
            meta=_meta(started),
        )

    def _fail(self, context: Context, errors: ErrorCollection, started: float) -> Outcome:
        messages = errors.full_messages()
        context.set("errors", errors)
        context.set("error_messages", messages)
        return Outcome(
            service=self.service_cls.service_path(),
            success=False,
            errors=errors,
            error_messages=messages,
            fields=_snapshot(context, self.service_cls),
            meta=_meta(started),
        )


def _snapshot(context: Context, service_cls: type[Service]) -> dict[str, Any]:
    """Every declared field (None when unset), then any other written key."""
    fields = {name: context.get(name) for name in service_cls.field_registry().field_names}
    for key, value in context.to_dict().items():
        if key not in BASE_CONTEXT_KEYS:
            fields[key] = value
    return fields


def _meta(started: float) -> dict[str, Any]:
    return {"duration_ms": round((time.perf_counter() - started) * 1000, 2)}
