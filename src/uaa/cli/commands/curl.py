"""Raw authenticated requests.

Commands:
    uaa curl /Users -X GET -H "Accept: application/json"
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from uaa.cli.commands.common import ZoneOption, build_curl, get_state, report_errors
from uaa.cli.session.store import SessionStore


def curl(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Path on the target, e.g. /Users?count=5")],
    method: Annotated[
        str,
        typer.Option("--method", "-X", help="HTTP method"),
    ] = "GET",
    header: Annotated[
        Optional[list[str]],
        typer.Option("--header", "-H", help="Header line 'Name: value' (repeatable)"),
    ] = None,
    data: Annotated[
        str,
        typer.Option("--data", "-d", help="Request body"),
    ] = "",
    zone: ZoneOption = None,
) -> None:
    """Send an authenticated request to the target and print the raw response.

    Caller headers replace same-named defaults, but never the Authorization or
    zone-switch headers derived from the active context.
    """
    state = get_state(ctx)

    with report_errors(state.verbose):
        config = SessionStore().load()
        response = build_curl(config, state).curl(
            path,
            method=method,
            data=data,
            headers=header or [],
            zone_subdomain=zone,
        )

    typer.echo(response.headers, nl=False)
    typer.echo(response.body)
