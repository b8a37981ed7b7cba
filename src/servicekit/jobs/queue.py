"""Job-queue collaborators and the process-wide queue setting.

Three queues ship with servicekit:

- :class:`InlineQueue` (default): runs each job as soon as it is enqueued.
  Failures raise straight back to the enqueuing caller.
- :class:`RecordingQueue`: records jobs without running them, for tests.
  ``perform_enqueued()`` runs what was recorded.
- :class:`~servicekit.jobs.database.DatabaseQueue`: persists jobs in SQLite
  and runs them from a worker, with retries and a dead-letter state.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from servicekit.jobs.models import DEFAULT_QUEUE, Job, JobStatus

if TYPE_CHECKING:
    from servicekit.config.settings import ServicekitSettings

logger = logging.getLogger(__name__)


@runtime_checkable
class JobQueue(Protocol):
    """What the async adapter needs from a queue backend."""

    default_queue: str

    def enqueue(self, job: Job) -> Job:
        """Accept *job*; return it as stored."""
        ...


class InlineQueue:
    """Executes jobs synchronously at enqueue time."""

    def __init__(self, *, default_queue: str = DEFAULT_QUEUE) -> None:
        self.default_queue = default_queue

    def enqueue(self, job: Job) -> Job:
        from servicekit.jobs.adapter import AsyncAdapter

        AsyncAdapter(self).execute(*job.payload)
        return job.model_copy(update={"status": JobStatus.COMPLETED, "attempts": 1})


class RecordingQueue:
    """Keeps enqueued jobs in memory until :meth:`perform_enqueued` runs them."""

    def __init__(self, *, default_queue: str = DEFAULT_QUEUE) -> None:
        self.default_queue = default_queue
        self.enqueued_jobs: list[Job] = []
        self.performed_jobs: list[Job] = []
        self._lock = threading.Lock()

    def enqueue(self, job: Job) -> Job:
        with self._lock:
            self.enqueued_jobs.append(job)
        return job

    def perform_enqueued(self) -> list[Job]:
        """Run every recorded job in order. The first failure propagates."""
        from servicekit.jobs.adapter import AsyncAdapter

        adapter = AsyncAdapter(self)
        with self._lock:
            pending, self.enqueued_jobs = self.enqueued_jobs, []
        for job in pending:
            adapter.execute(*job.payload)
            self.performed_jobs.append(job)
        return pending

    def clear(self) -> None:
        with self._lock:
            self.enqueued_jobs.clear()
            self.performed_jobs.clear()


# ---------------------------------------------------------------------------
# Process-wide queue
# ---------------------------------------------------------------------------

_queue: JobQueue = InlineQueue()
_queue_lock = threading.Lock()


def get_queue() -> JobQueue:
    return _queue


def configure_queue(queue: JobQueue) -> JobQueue:
    """Install *queue* as the process-wide queue; return the previous one."""
    global _queue
    with _queue_lock:
        previous, _queue = _queue, queue
    logger.debug("Job queue set to %s", type(queue).__name__)
    return previous


def build_queue(settings: ServicekitSettings) -> JobQueue:
    """Construct the queue named by ``settings.queue.adapter``."""
    config = settings.queue
    if config.adapter == "inline":
        return InlineQueue(default_queue=config.default_queue)
    if config.adapter == "test":
        return RecordingQueue(default_queue=config.default_queue)

    from servicekit.infrastructure.database.engine import init_database
    from servicekit.jobs.database import DatabaseQueue
    from servicekit.plugins.manager import PluginManager

    plugin_manager = None
    if settings.plugins.enabled:
        plugin_manager = PluginManager()
        plugin_manager.discover_and_load()

    return DatabaseQueue(
        init_database(settings.database_path),
        plugin_manager=plugin_manager,
        sync=config.sync,
        max_attempts=config.max_attempts,
        max_workers=config.max_workers,
        default_queue=config.default_queue,
    )
