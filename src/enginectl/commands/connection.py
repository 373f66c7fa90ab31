"""Command group: remote connection destinations (connection add)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enginectl.commands._base import EngineGroup, was_supplied

if TYPE_CHECKING:
    from enginectl.commands._context import AppContext

_CONNECTION_EXAMPLES = """\
  enginectl connection add laptop server.fubar.com
  enginectl connection add --identity ~/.ssh/dev_rsa testing ssh://root@server.fubar.com:2222
  enginectl connection add --identity ~/.ssh/dev_rsa --port 22 production root@server.fubar.com
  enginectl connection add debug tcp://localhost:8080
  enginectl connection add local unix:///run/podman/podman.sock"""


@click.group(cls=EngineGroup, examples=_CONNECTION_EXAMPLES)
@click.pass_obj
def connection(app: AppContext) -> None:
    """Manage remote destinations for the engine service."""


@connection.command(examples=_CONNECTION_EXAMPLES)
@click.argument("name")
@click.argument("destination")
@click.option(
    "-p",
    "--port",
    type=click.IntRange(0, 65535),
    default=None,
    help="SSH port number for destination (default from config, 22).",
)
@click.option("--identity", default=None, help="Path to SSH identity file.")
@click.option(
    "--socket-path",
    default=None,
    help="Path to the service socket on the remote host.",
)
@click.option(
    "-d", "--default", "make_default", is_flag=True, help="Set connection to be default."
)
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    destination: str,
    port: int | None,
    identity: str | None,
    socket_path: str | None,
    make_default: bool,
) -> None:
    """Record DESTINATION as connection NAME.

    \b
    DESTINATION is one of the form:
      [user@]hostname (will default to ssh)
      ssh://[user@]hostname[:port][/path]
      tcp://hostname:port (not secured)
      unix://path (absolute path required)
    """
    from enginectl.domain.destinations import ResolveOptions

    app: AppContext = ctx.obj
    options = ResolveOptions(
        port=port if port is not None else app.settings.connections.default_port,
        port_supplied=port is not None,
        identity=identity,
        identity_supplied=was_supplied(ctx, "identity"),
        socket_path=socket_path,
        socket_path_supplied=was_supplied(ctx, "socket_path"),
        make_default=make_default,
    )
    app.emit(app.connections().add(name, destination, options))
