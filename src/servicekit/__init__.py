"""servicekit — service objects with typed fields, validation and callbacks."""

from servicekit.domain.callbacks import after_call, around_call, before_call
from servicekit.domain.fields import Input, Output
from servicekit.domain.rules import Format, Inclusion, Length, Presence, validator
from servicekit.errors import (
    AsyncExecutionFailure,
    CallbackContractError,
    ServicekitError,
    UndeclaredFieldWrite,
    UnresolvedClass,
)
from servicekit.jobs.queue import configure_queue
from servicekit.jobs.service_job import JobService
from servicekit.services.base import Service
from servicekit.services.reply import Reply, rejoin, reply, reply_with
from servicekit.services.result import Outcome

__version__ = "0.1.0"

__all__ = [
    "AsyncExecutionFailure",
    "CallbackContractError",
    "Format",
    "Inclusion",
    "Input",
    "JobService",
    "Length",
    "Outcome",
    "Output",
    "Presence",
    "Reply",
    "Service",
    "ServicekitError",
    "UndeclaredFieldWrite",
    "UnresolvedClass",
    "__version__",
    "after_call",
    "around_call",
    "before_call",
    "configure_queue",
    "rejoin",
    "reply",
    "reply_with",
    "validator",
]
