"""Pluggy hook specifications for job lifecycle events.

Dispatched by the database job queue. Hook arguments are plain data so a
plugin never holds on to queue internals.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("servicekit")
hookimpl = pluggy.HookimplMarker("servicekit")


class ServicekitHookSpec:
    """Hook specifications for the servicekit plugin system."""

    @hookspec
    def post_enqueue(
        self,
        job_id: str,
        class_name: str,
        queue: str,
        args: dict[str, Any],
    ) -> None:
        """Called after a job is written to the queue."""

    @hookspec
    def post_perform(
        self,
        job_id: str,
        class_name: str,
        attempts: int,
    ) -> None:
        """Called after a job's service ran successfully."""

    @hookspec
    def post_failure(
        self,
        job_id: str,
        class_name: str,
        error: str,
        attempts: int,
        dead_letter: bool,
    ) -> None:
        """Called after a job failed; ``dead_letter`` means it will not be retried."""
