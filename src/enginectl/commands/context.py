"""Command group: docker-compatible contexts (context create)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enginectl.commands._base import EngineGroup

if TYPE_CHECKING:
    from enginectl.commands._context import AppContext

_CONTEXT_EXAMPLES = """\
  enginectl context create remote --docker host=ssh://root@server.fubar.com
  enginectl context create build --docker host=tcp://build.example.com:2376"""

_IGNORED_HELP = "Ignored.  Just for script compatibility."


@click.group(cls=EngineGroup, examples=_CONTEXT_EXAMPLES)
@click.pass_obj
def context(app: AppContext) -> None:
    """Docker-compatible aliases for connection management."""


@context.command(examples=_CONTEXT_EXAMPLES)
@click.argument("name")
@click.option("--docker", default="", help="Destination as host=<destination>.")
@click.option("--description", default=None, help=_IGNORED_HELP)
@click.option("--from", "from_", default=None, help=_IGNORED_HELP)
@click.option("--kubernetes", default=None, help=_IGNORED_HELP)
@click.option("--default-stack-orchestrator", default=None, help=_IGNORED_HELP)
@click.pass_obj
def create(
    app: AppContext,
    name: str,
    docker: str,
    description: str | None,
    from_: str | None,
    kubernetes: str | None,
    default_stack_orchestrator: str | None,
) -> None:
    """Record a connection NAME from a docker-style --docker description."""
    app.emit(app.connections().create_context(name, docker))
