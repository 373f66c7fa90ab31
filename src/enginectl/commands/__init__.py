"""Subcommand modules for enginectl.

Provides register_commands() which uses deferred imports to keep
``enginectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from enginectl.commands.connection import connection
    from enginectl.commands.context import context

    cli.add_command(connection)
    cli.add_command(context)
