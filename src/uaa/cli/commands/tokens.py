"""Token acquisition commands.

Commands:
    uaa get-implicit-token CLIENT_ID --scope openid --port 8080
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from uaa.cli.commands.common import get_state, print_json, report_errors, split_list
from uaa.cli.config import get_settings
from uaa.cli.grants.implicit import implicit_token_command
from uaa.cli.grants.launcher import BrowserLauncher
from uaa.cli.session.store import SessionStore


def get_implicit_token(
    ctx: typer.Context,
    client_id: Annotated[str, typer.Argument(help="Client registered for the implicit grant")],
    scope: Annotated[
        str,
        typer.Option("--scope", help="Comma-separated scopes to request"),
    ] = "openid",
    port: Annotated[
        Optional[int],
        typer.Option("--port", help="Local port the browser is redirected back to"),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Give up after this many seconds (default: wait forever)"),
    ] = None,
) -> None:
    """Obtain an access token using the implicit grant type.

    Opens a browser at the UAA authorize page and waits for the redirect to
    http://localhost:PORT carrying the token, which is saved to the active
    context. The client must list that URL among its redirect URIs.
    """
    state = get_state(ctx)
    callback_port = port if port is not None else get_settings().callback_port

    with report_errors(state.verbose):
        run = implicit_token_command(
            BrowserLauncher(),
            split_list(scope),
            callback_port,
            store=SessionStore(),
            timeout=timeout,
        )
        typer.echo(
            f"Launching browser for client {client_id}. "
            f"Waiting for callback on http://localhost:{callback_port} ..."
        )
        context = run([client_id])

    typer.secho("Access token added to active context.", fg=typer.colors.GREEN, err=True)
    print_json(context)
