"""Async execution — job payloads, queues, and the async adapter."""

from servicekit.jobs.adapter import AsyncAdapter, resolve_service_class
from servicekit.jobs.models import Job, JobStatus, QueueOptions
from servicekit.jobs.queue import InlineQueue, JobQueue, RecordingQueue, configure_queue, get_queue
from servicekit.jobs.service_job import JobService

__all__ = [
    "AsyncAdapter",
    "InlineQueue",
    "Job",
    "JobQueue",
    "JobService",
    "JobStatus",
    "QueueOptions",
    "RecordingQueue",
    "configure_queue",
    "get_queue",
    "resolve_service_class",
]
