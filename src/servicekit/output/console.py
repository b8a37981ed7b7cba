"""Rich Console factory and the job table renderer.

Consoles render to a StringIO buffer so commands keep a ``-> str``
contract. In non-TTY environments (tests, pipes) Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from servicekit.jobs.models import Job

SERVICEKIT_THEME = Theme(
    {
        "sk.status.pending": "yellow",
        "sk.status.running": "cyan",
        "sk.status.completed": "bold green",
        "sk.status.failed": "bold red",
        "sk.status.dead_letter": "red",
        "sk.id": "dim",
        "sk.class": "bold cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SERVICEKIT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render_jobs(jobs: list[Job], *, no_color: bool = False) -> str:
    """Render jobs as a table, one row per job."""
    console = create_console(no_color=no_color)
    if not jobs:
        console.print("No jobs.")
        return get_output(console)

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="sk.id")
    table.add_column("Service", style="sk.class")
    table.add_column("Queue")
    table.add_column("Status")
    table.add_column("Attempts", justify="right")
    table.add_column("Error")
    for job in jobs:
        table.add_row(
            job.id[:12],
            escape(job.class_name),
            job.queue,
            f"[sk.status.{job.status.value}]{job.status.value}[/]",
            str(job.attempts),
            escape(job.error or ""),
        )
    console.print(table)
    return get_output(console)
