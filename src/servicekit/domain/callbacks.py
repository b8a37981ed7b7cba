"""CallbackChain — before / around / after hooks for the ``call`` event.

Execution order is fixed relative to the business logic, not relative to
the order in which phases were mixed in the class body::

    before handlers        (registration order)
    around handlers, pre   (outside-in, registration order)
      business logic
    around handlers, post  (inside-out)
    after handlers         (registration order)

Handlers are registered at class-definition time, inherited, and appended;
none are ever removed. A handler registered by method name is looked up on
the service instance at run time, so a subclass may override it.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

from servicekit.errors import CallbackContractError

CALL_EVENT = "call"
CALLBACK_MARKER = "__servicekit_callback__"

_T = TypeVar("_T")
_F = TypeVar("_F", bound=Callable[..., Any])


class Phase(StrEnum):
    BEFORE = "before"
    AROUND = "around"
    AFTER = "after"


@dataclass(frozen=True)
class Callback:
    phase: Phase
    handler: str | Callable[..., Any]

    @property
    def label(self) -> str:
        if isinstance(self.handler, str):
            return self.handler
        return getattr(self.handler, "__qualname__", repr(self.handler))

    def resolve(self, subject: Any) -> Callable[..., Any]:
        if isinstance(self.handler, str):
            return getattr(subject, self.handler)
        handler = self.handler

        def bound(*args: Any) -> Any:
            return handler(subject, *args)

        return bound


class CallbackChain:
    """Ordered hooks for one lifecycle event, inherited from parent chains."""

    def __init__(self, event: str = CALL_EVENT, parents: Sequence[CallbackChain] = ()) -> None:
        self.event = event
        self._parents = tuple(parents)
        self._own: list[Callback] = []
        self._lock = threading.Lock()

    def register(self, phase: Phase | str, handler: str | Callable[..., Any]) -> Callback:
        callback = Callback(Phase(phase), handler)
        with self._lock:
            self._own.append(callback)
        return callback

    @property
    def callbacks(self) -> list[Callback]:
        """Inherited callbacks first, then this class's own."""
        seen: set[int] = set()
        merged: list[Callback] = []
        for parent in self._parents:
            for callback in parent.callbacks:
                if id(callback) not in seen:
                    seen.add(id(callback))
                    merged.append(callback)
        merged.extend(self._own)
        return merged

    def phase(self, phase: Phase) -> list[Callback]:
        return [c for c in self.callbacks if c.phase is phase]

    def run(self, subject: Any, core: Callable[[], _T]) -> _T:
        """Run *core* inside the chain and return its value.

        An exception from any handler or from *core* propagates unchanged;
        handlers after the failure point do not run.
        """
        for callback in self.phase(Phase.BEFORE):
            callback.resolve(subject)()

        outcome: list[_T] = []

        def innermost() -> None:
            outcome.append(core())

        continuation: Callable[[], None] = innermost
        for callback in reversed(self.phase(Phase.AROUND)):
            continuation = _wrap(subject, callback, continuation)
        continuation()

        for callback in self.phase(Phase.AFTER):
            callback.resolve(subject)()

        return outcome[0]


def _wrap(subject: Any, callback: Callback, proceed: Callable[[], None]) -> Callable[[], None]:
    def wrapped() -> None:
        calls = 0

        def continuation() -> None:
            nonlocal calls
            calls += 1
            if calls > 1:
                raise CallbackContractError(callback.label, calls)
            proceed()

        callback.resolve(subject)(continuation)
        if calls != 1:
            raise CallbackContractError(callback.label, calls)

    return wrapped


# ---------------------------------------------------------------------------
# Class-body decorators
# ---------------------------------------------------------------------------


def _marker(phase: Phase) -> Callable[[_F], _F]:
    def decorate(func: _F) -> _F:
        setattr(func, CALLBACK_MARKER, phase)
        return func

    return decorate


before_call = _marker(Phase.BEFORE)
before_call.__doc__ = "Run the decorated method before the business logic."

around_call = _marker(Phase.AROUND)
around_call.__doc__ = "Wrap the business logic; the method receives a continuation to call once."

after_call = _marker(Phase.AFTER)
after_call.__doc__ = "Run the decorated method after the business logic returns."
