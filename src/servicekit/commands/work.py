"""Commands: drain the database queue and list its jobs."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from servicekit.commands._base import ServicekitCommand

if TYPE_CHECKING:
    from servicekit.commands._context import AppContext


@click.command(
    cls=ServicekitCommand,
    examples="""\
  servicekit work
  servicekit work --queue mailers""",
)
@click.option("--queue", "queue_name", default=None, help="Only run jobs on this queue.")
@click.pass_obj
def work(app: AppContext, queue_name: str | None) -> None:
    """Run every due job once. Exits 1 if any job failed."""
    app.ensure_importable()
    queue = app.database_queue
    try:
        results = queue.work(queue=queue_name)
    finally:
        queue.shutdown()

    if app.settings.json_output:
        click.echo(json.dumps(results, indent=2))
    else:
        for item in results:
            click.echo(f"{item['status']:<12} {item['class_name']} ({item['id']})")
        click.echo(f"{len(results)} job(s) run.")
    if any(item["status"] != "completed" for item in results):
        raise SystemExit(1)


@click.command(
    cls=ServicekitCommand,
    examples="""\
  servicekit jobs
  servicekit jobs --status dead_letter""",
)
@click.option(
    "--status",
    type=click.Choice(["pending", "running", "completed", "failed", "dead_letter"]),
    default=None,
    help="Only list jobs with this status.",
)
@click.pass_obj
def jobs(app: AppContext, status: str | None) -> None:
    """List jobs in the database queue."""
    from servicekit.output.console import render_jobs

    queue = app.database_queue
    try:
        found = queue.list_jobs(status=status)
    finally:
        queue.shutdown()

    if app.settings.json_output:
        click.echo(json.dumps([job.model_dump(mode="json") for job in found], indent=2))
    else:
        click.echo(render_jobs(found), nl=False)
