"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy queue construction and centralized
outcome emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from servicekit.output.formatters import format_outcome

if TYPE_CHECKING:
    from servicekit.config.settings import ServicekitSettings
    from servicekit.jobs.database import DatabaseQueue
    from servicekit.jobs.queue import JobQueue
    from servicekit.services.base import Service
    from servicekit.services.result import Outcome


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The queue is built on first use so ``--help`` and ``--version`` never
    touch the job database.
    """

    def __init__(self, settings: ServicekitSettings) -> None:
        self.settings = settings
        self._queue: JobQueue | None = None

        from servicekit.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def queue(self) -> JobQueue:
        """The configured queue, installed process-wide on first access."""
        return self.install_queue()

    def install_queue(self) -> JobQueue:
        """Build the configured queue once and make it the process-wide queue."""
        if self._queue is None:
            from servicekit.jobs.queue import build_queue, configure_queue

            self._queue = build_queue(self.settings)
            configure_queue(self._queue)
        return self._queue

    @property
    def database_queue(self) -> DatabaseQueue:
        """The queue, which must be the database adapter.

        Raises:
            click.ClickException: If another adapter is configured.
        """
        from servicekit.jobs.database import DatabaseQueue

        queue = self.queue
        if not isinstance(queue, DatabaseQueue):
            adapter = self.settings.queue.adapter
            msg = f"This command needs [queue] adapter = \"database\" (got {adapter!r})"
            raise click.ClickException(msg)
        return queue

    def resolve(self, class_name: str) -> type[Service]:
        """Resolve a service by dotted path, importing from the project root.

        Raises:
            click.ClickException: If the name does not resolve to a service.
        """
        from servicekit.errors import UnresolvedClass
        from servicekit.jobs.adapter import resolve_service_class

        self.ensure_importable()
        try:
            return resolve_service_class(class_name)
        except UnresolvedClass as exc:
            raise click.ClickException(str(exc)) from exc

    def ensure_importable(self) -> None:
        """Put the project root on sys.path so dotted service paths import."""
        root = str(self.settings.project_root)
        if root not in sys.path:
            sys.path.insert(0, root)

    def emit(self, outcome: Outcome) -> None:
        """Format and output an Outcome with correct exit semantics.

        * Success: writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_outcome(outcome, json_output=self.settings.json_output)
        if outcome.success:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
