"""Subcommand modules for servicekit.

Provides register_commands() which uses deferred imports to keep
``servicekit --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from servicekit.commands.call import call, enqueue
    from servicekit.commands.work import jobs, work

    cli.add_command(call)
    cli.add_command(enqueue)
    cli.add_command(work)
    cli.add_command(jobs)
