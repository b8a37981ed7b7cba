"""SQLite-backed job queue with retries and a dead-letter state.

Jobs are written to the ``jobs`` table at enqueue time and run later by
:meth:`DatabaseQueue.work`, either inline (``sync=True``) or on a
ThreadPoolExecutor. A job is claimed as ``running`` before it runs, so
workers sharing the database never run the same job twice. A failing job
goes to ``failed`` and is picked up by the next ``work()`` call until
``max_attempts`` is reached, then to ``dead_letter``. A job whose class
cannot be resolved is dead-lettered on the first attempt.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, or_, select, update

from servicekit.errors import UnresolvedClass
from servicekit.infrastructure.database.schema import jobs
from servicekit.jobs.adapter import AsyncAdapter
from servicekit.jobs.models import DEFAULT_QUEUE, Job, JobStatus, to_iso, utc_now

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine, Row

    from servicekit.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class DatabaseQueue:
    """Persistent job queue.

    Parameters:
        engine: SQLAlchemy engine with the ``jobs`` table.
        plugin_manager: Optional PluginManager for lifecycle hooks.
        sync: Run jobs inline in ``work()`` instead of on the executor.
        max_attempts: Attempts before a job is marked ``dead_letter``.
        max_workers: ThreadPoolExecutor worker count.
        default_queue: Queue name used when a job names none.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        plugin_manager: PluginManager | None = None,
        sync: bool = False,
        max_attempts: int = 3,
        max_workers: int = 2,
        default_queue: str = DEFAULT_QUEUE,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._sync = sync
        self._max_attempts = max_attempts
        self.default_queue = default_queue
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._adapter = AsyncAdapter(self)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def enqueue(self, job: Job) -> Job:
        """Persist *job* as ``pending``. Nothing runs until :meth:`work`."""
        with self._engine.begin() as conn:
            conn.execute(
                insert(jobs).values(
                    id=job.id,
                    class_name=job.class_name,
                    args=json.dumps(job.args),
                    queue=job.queue,
                    status=JobStatus.PENDING.value,
                    attempts=0,
                    scheduled_at=to_iso(job.scheduled_at),
                    enqueued_at=to_iso(job.enqueued_at),
                )
            )
        self._dispatch(
            "post_enqueue",
            {"job_id": job.id, "class_name": job.class_name, "queue": job.queue, "args": job.args},
        )
        return job

    def work(self, *, queue: str | None = None, now: datetime | None = None) -> list[dict[str, Any]]:
        """Run every due ``pending`` or ``failed`` job, oldest first.

        Each job is claimed (moved to ``running``) before it runs; a job
        another worker claimed first is skipped. Returns a summary list of
        ``{id, class_name, status}`` per job this call ran.
        """
        due = [row for row in self._due_jobs(queue=queue, now=now) if self._claim(row.id)]
        if self._executor is None:
            for row in due:
                self._execute(row.id, row.class_name, json.loads(row.args))
        else:
            futures: list[Future[None]] = [
                self._executor.submit(self._execute, row.id, row.class_name, json.loads(row.args))
                for row in due
            ]
            for future in futures:
                future.result()

        results: list[dict[str, Any]] = []
        for row in due:
            job = self.get(row.id)
            results.append({"id": job.id, "class_name": job.class_name, "status": job.status.value})
        return results

    def get(self, job_id: str) -> Job:
        """Load a job by id.

        Raises:
            KeyError: If no job has that id.
        """
        with self._engine.connect() as conn:
            row = conn.execute(select(jobs).where(jobs.c.id == job_id)).first()
        if row is None:
            raise KeyError(job_id)
        return _row_to_job(row)

    def list_jobs(self, *, status: str | None = None) -> list[Job]:
        stmt = select(jobs).order_by(jobs.c.enqueued_at)
        if status is not None:
            stmt = stmt.where(jobs.c.status == status)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_job(row) for row in rows]

    def shutdown(self) -> None:
        """Shutdown the executor, waiting for running jobs."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _due_jobs(self, *, queue: str | None, now: datetime | None) -> list[Row[Any]]:
        cutoff = to_iso(now or utc_now())
        stmt = (
            select(jobs.c.id, jobs.c.class_name, jobs.c.args)
            .where(jobs.c.status.in_([JobStatus.PENDING.value, JobStatus.FAILED.value]))
            .where(or_(jobs.c.scheduled_at.is_(None), jobs.c.scheduled_at <= cutoff))
            .order_by(jobs.c.enqueued_at)
        )
        if queue is not None:
            stmt = stmt.where(jobs.c.queue == queue)
        with self._engine.connect() as conn:
            return list(conn.execute(stmt).fetchall())

    def _claim(self, job_id: str) -> bool:
        """Atomically move a due job to ``running``; False if already taken."""
        with self._engine.begin() as conn:
            claimed = conn.execute(
                update(jobs)
                .where(jobs.c.id == job_id)
                .where(jobs.c.status.in_([JobStatus.PENDING.value, JobStatus.FAILED.value]))
                .values(status=JobStatus.RUNNING.value)
            )
        return claimed.rowcount == 1

    def _execute(self, job_id: str, class_name: str, args: dict[str, Any]) -> None:
        """Run one job and record the result. Job failures never escape."""
        try:
            self._adapter.execute(class_name, args)
        except UnresolvedClass as exc:
            logger.warning("Job %s dead-lettered: %s", job_id, exc)
            self._mark_failed(job_id, class_name, str(exc), fatal=True)
        except Exception as exc:
            logger.info("Job %s (%s) failed: %s", job_id, class_name, exc)
            self._mark_failed(job_id, class_name, str(exc), fatal=False)
        else:
            attempts = self._mark_completed(job_id)
            self._dispatch(
                "post_perform",
                {"job_id": job_id, "class_name": class_name, "attempts": attempts},
            )

    def _mark_completed(self, job_id: str) -> int:
        with self._engine.begin() as conn:
            attempts = conn.execute(select(jobs.c.attempts).where(jobs.c.id == job_id)).scalar_one() + 1
            conn.execute(
                update(jobs)
                .where(jobs.c.id == job_id)
                .values(
                    status=JobStatus.COMPLETED.value,
                    attempts=attempts,
                    error=None,
                    completed_at=to_iso(utc_now()),
                )
            )
        return attempts

    def _mark_failed(self, job_id: str, class_name: str, error: str, *, fatal: bool) -> None:
        """Increment attempts, mark failed or dead_letter."""
        with self._engine.begin() as conn:
            attempts = conn.execute(select(jobs.c.attempts).where(jobs.c.id == job_id)).scalar_one() + 1
            dead = fatal or attempts >= self._max_attempts
            conn.execute(
                update(jobs)
                .where(jobs.c.id == job_id)
                .values(
                    status=(JobStatus.DEAD_LETTER if dead else JobStatus.FAILED).value,
                    error=error,
                    attempts=attempts,
                    completed_at=to_iso(utc_now()) if dead else None,
                )
            )
        self._dispatch(
            "post_failure",
            {
                "job_id": job_id,
                "class_name": class_name,
                "error": error,
                "attempts": attempts,
                "dead_letter": dead,
            },
        )

    def _dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        if self._pm is None:
            return
        try:
            getattr(self._pm.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)


def _row_to_job(row: Row[Any]) -> Job:
    return Job(
        id=row.id,
        class_name=row.class_name,
        args=json.loads(row.args),
        queue=row.queue,
        scheduled_at=row.scheduled_at,
        enqueued_at=row.enqueued_at,
        status=JobStatus(row.status),
        attempts=row.attempts,
        error=row.error,
    )
