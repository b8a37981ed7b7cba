"""Commands: run a service now or enqueue it for later."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from servicekit.commands._base import ServicekitCommand, parse_assignments

if TYPE_CHECKING:
    from servicekit.commands._context import AppContext


@click.command(
    cls=ServicekitCommand,
    examples="""\
  servicekit call myapp.services.CreateUser name=Ada age=36
  servicekit --json call myapp.services.CreateUser name=Ada""",
)
@click.argument("service")
@click.argument("args", nargs=-1)
@click.pass_obj
def call(app: AppContext, service: str, args: tuple[str, ...]) -> None:
    """Invoke SERVICE with KEY=VALUE arguments and print its outcome."""
    from servicekit.errors import UndeclaredFieldWrite

    service_cls = app.resolve(service)
    # Services that enqueue follow-up jobs use the configured queue.
    app.install_queue()
    try:
        outcome = service_cls.call(**parse_assignments(args))
    except UndeclaredFieldWrite as exc:
        raise click.ClickException(str(exc)) from exc
    app.emit(outcome)


@click.command(
    cls=ServicekitCommand,
    examples="""\
  servicekit enqueue myapp.services.SendEmail to=ada@example.com
  servicekit enqueue myapp.services.SendEmail --queue mailers --wait 60""",
)
@click.argument("service")
@click.argument("args", nargs=-1)
@click.option("--queue", "queue_name", default=None, help="Queue name (default from config).")
@click.option("--wait", type=float, default=None, help="Delay in seconds before the job is due.")
@click.pass_obj
def enqueue(
    app: AppContext,
    service: str,
    args: tuple[str, ...],
    queue_name: str | None,
    wait: float | None,
) -> None:
    """Enqueue SERVICE with KEY=VALUE arguments on the configured queue."""
    from servicekit.errors import AsyncExecutionFailure
    from servicekit.jobs.adapter import AsyncAdapter

    service_cls = app.resolve(service)
    options: dict[str, object] = {}
    if queue_name is not None:
        options["queue"] = queue_name
    if wait is not None:
        options["wait"] = wait

    try:
        job = AsyncAdapter(app.queue).enqueue(
            service_cls.service_path(), parse_assignments(args), options
        )
    except AsyncExecutionFailure as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1) from exc

    if app.settings.json_output:
        click.echo(json.dumps(job.model_dump(mode="json"), indent=2))
    else:
        click.echo(f"Enqueued {job.class_name} on {job.queue} ({job.id}) [{job.status.value}]")
