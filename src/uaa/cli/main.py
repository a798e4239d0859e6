"""UAA CLI - Main entrypoint.

Usage:
    uaa target https://uaa.example.com
    uaa get-implicit-token shinyclient --scope openid
    uaa curl /Users -H "Accept: application/json"
"""

from __future__ import annotations

from typing import Annotated

import typer

from uaa.cli.commands import clients, curl, groups, target, tokens, users
from uaa.cli.commands.common import CLIState
from uaa.cli.logs import configure_logging

app = typer.Typer(
    name="uaa",
    help="Command-line client for UAA identity servers",
    add_completion=True,
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output and request tracing"),
    ] = False,
) -> None:
    """Manage clients, users, groups and tokens on a UAA server."""
    configure_logging("DEBUG" if verbose else None)
    ctx.obj = CLIState(verbose=verbose)


# Target and context
app.command("target")(target.target)
app.command("context")(target.context)

# Tokens
app.command("get-implicit-token")(tokens.get_implicit_token)

# Raw requests
app.command("curl")(curl.curl)

# Clients
app.command("create-client")(clients.create_client)
app.command("get-client")(clients.get_client)
app.command("list-clients")(clients.list_clients)
app.command("delete-client")(clients.delete_client)

# Users
app.command("create-user")(users.create_user)
app.command("get-user")(users.get_user)
app.command("list-users")(users.list_users)
app.command("delete-user")(users.delete_user)

# Groups
app.command("create-group")(groups.create_group)
app.command("get-group")(groups.get_group)
app.command("list-groups")(groups.list_groups)
app.command("add-member")(groups.add_member)


def create_app() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    create_app()
