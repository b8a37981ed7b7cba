"""AsyncAdapter — runs service objects through a job queue.

``enqueue`` hands ``(class_name, args)`` and queue options to the queue and
runs nothing. ``execute`` is what the queue calls when the job is due: it
resolves the class, invokes it, and turns a failing Outcome into a raised
:class:`~servicekit.errors.AsyncExecutionFailure` so the queue's own
retry / dead-letter policy applies. The adapter never retries.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from servicekit.errors import AsyncExecutionFailure, UnresolvedClass
from servicekit.jobs.models import Job
from servicekit.services.base import SERVICE_INDEX, Service

if TYPE_CHECKING:
    from servicekit.jobs.queue import JobQueue

logger = logging.getLogger(__name__)


def _import_dotted(class_name: str) -> Any:
    """Import ``package.module.Outer.Inner`` by the longest importable module prefix.

    A prefix that does not exist is skipped. Errors raised while importing a
    module that does exist (including a missing dependency) propagate.
    """
    parts = class_name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target: Any = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            if exc.name is None or not (module_name + ".").startswith(exc.name + "."):
                raise
            continue
        for attr in parts[split:]:
            target = getattr(target, attr, None)
            if target is None:
                return None
        return target
    return None


def resolve_service_class(class_name: str, args: dict[str, Any] | None = None) -> type[Service]:
    """Resolve *class_name* to a Service subclass.

    Classes defined in this process are found by dotted path first; other
    names are imported.

    Raises:
        UnresolvedClass: If the name does not resolve to a Service subclass,
            or importing its module raised (chained as ``__cause__``).
    """
    resolved: Any = SERVICE_INDEX.get(class_name)
    if resolved is None:
        try:
            resolved = _import_dotted(class_name)
        except Exception as exc:
            raise UnresolvedClass(class_name, dict(args or {})) from exc
    if not (isinstance(resolved, type) and issubclass(resolved, Service)):
        raise UnresolvedClass(class_name, dict(args or {}))
    return resolved


class AsyncAdapter:
    """Bridges service classes and a :class:`~servicekit.jobs.queue.JobQueue`.

    Parameters:
        queue: Queue to enqueue on; defaults to the process-wide queue.
    """

    def __init__(self, queue: JobQueue | None = None) -> None:
        self._queue = queue

    @property
    def queue(self) -> JobQueue:
        if self._queue is not None:
            return self._queue
        from servicekit.jobs.queue import get_queue

        return get_queue()

    def enqueue(
        self,
        class_name: str,
        args: dict[str, Any],
        queue_options: dict[str, Any] | None = None,
    ) -> Job:
        """Build the job payload and hand it to the queue.

        Raises:
            ValueError: If *queue_options* holds an unrecognized key.
        """
        queue = self.queue
        job = Job.create(class_name, args, queue_options, default_queue=queue.default_queue)
        logger.debug("Enqueueing %s on %s (job %s)", class_name, job.queue, job.id)
        return queue.enqueue(job)

    def execute(self, class_name: str, args: dict[str, Any]) -> None:
        """Run a queued job. The Outcome of a successful run is discarded.

        Raises:
            UnresolvedClass: If *class_name* cannot be resolved (fatal).
            AsyncExecutionFailure: If the service returns a failing Outcome.
        """
        service_cls = resolve_service_class(class_name, args)
        outcome = service_cls.call(**args)
        if outcome.failure:
            raise AsyncExecutionFailure(class_name, outcome.errors, args)
        logger.debug("Job for %s completed", class_name)
