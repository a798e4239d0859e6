"""OAuth client commands.

Commands:
    uaa create-client CLIENT_ID -s SECRET --authorized_grant_types client_credentials
    uaa get-client CLIENT_ID
    uaa list-clients
    uaa delete-client CLIENT_ID
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from uaa.cli.api.models import UaaClient
from uaa.cli.commands.common import (
    ZoneOption,
    build_api,
    get_state,
    print_json,
    report_errors,
    split_list,
)
from uaa.cli.errors import UaaError, UaaNotFoundError


def apply_client_overrides(
    base: UaaClient,
    *,
    client_id: str,
    client_secret: str | None,
    display_name: str | None,
    authorized_grant_types: str | None,
    authorities: str | None,
    redirect_uri: str | None,
    scope: str | None,
    access_token_validity: int | None,
    refresh_token_validity: int | None,
    autoapprove: bool,
) -> UaaClient:
    """Copy ``base`` under a new client id, replacing only supplied fields."""
    updates: dict = {"client_id": client_id, "client_secret": client_secret, "autoapprove": autoapprove}
    if display_name:
        updates["display_name"] = display_name
    if authorized_grant_types:
        updates["authorized_grant_types"] = split_list(authorized_grant_types)
    if authorities:
        updates["authorities"] = split_list(authorities)
    if redirect_uri:
        updates["redirect_uri"] = split_list(redirect_uri)
    if scope:
        updates["scope"] = split_list(scope)
    if access_token_validity:
        updates["access_token_validity"] = access_token_validity
    if refresh_token_validity:
        updates["refresh_token_validity"] = refresh_token_validity
    return base.model_copy(update=updates)


def create_client(
    ctx: typer.Context,
    client_id: Annotated[str, typer.Argument(help="Client ID to register")],
    client_secret: Annotated[
        Optional[str],
        typer.Option("--client_secret", "-s", help="client secret"),
    ] = None,
    authorized_grant_types: Annotated[
        Optional[str],
        typer.Option("--authorized_grant_types", help="list of grant types allowed with this client"),
    ] = None,
    authorities: Annotated[
        Optional[str],
        typer.Option("--authorities", help="scopes requested by client during client_credentials grant"),
    ] = None,
    scope: Annotated[
        Optional[str],
        typer.Option(
            "--scope",
            help="scopes requested by client during authorization_code, implicit, or password grants",
        ),
    ] = None,
    redirect_uri: Annotated[
        Optional[str],
        typer.Option("--redirect_uri", help="callback urls allowed for use in authorization_code and implicit grants"),
    ] = None,
    display_name: Annotated[
        Optional[str],
        typer.Option("--display_name", help="a friendly human-readable name for this client"),
    ] = None,
    access_token_validity: Annotated[
        Optional[int],
        typer.Option("--access_token_validity", help="the time in seconds before issued access tokens expire"),
    ] = None,
    refresh_token_validity: Annotated[
        Optional[int],
        typer.Option("--refresh_token_validity", help="the time in seconds before issued refresh tokens expire"),
    ] = None,
    autoapprove: Annotated[
        bool,
        typer.Option("--autoapprove", help="Scopes do not require user approval"),
    ] = False,
    clone: Annotated[
        Optional[str],
        typer.Option("--clone", help="client_id of client configuration to clone"),
    ] = None,
    zone: ZoneOption = None,
) -> None:
    """Create an OAuth client registration in the UAA."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        api = build_api(state, zone)

        if clone:
            try:
                base = api.get_client(clone)
            except UaaNotFoundError as e:
                raise UaaError(f"The client {clone} could not be found.") from e
        else:
            base = UaaClient(client_id=client_id)

        to_create = apply_client_overrides(
            base,
            client_id=client_id,
            client_secret=client_secret,
            display_name=display_name,
            authorized_grant_types=authorized_grant_types,
            authorities=authorities,
            redirect_uri=redirect_uri,
            scope=scope,
            access_token_validity=access_token_validity,
            refresh_token_validity=refresh_token_validity,
            autoapprove=autoapprove,
        )
        created = api.create_client(to_create)

    typer.secho(
        f"The client {client_id} has been successfully created.",
        fg=typer.colors.GREEN,
        err=True,
    )
    print_json(created)


def get_client(
    ctx: typer.Context,
    client_id: Annotated[str, typer.Argument(help="Client ID to look up")],
    zone: ZoneOption = None,
) -> None:
    """View a client registration."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        client = build_api(state, zone).get_client(client_id)
    print_json(client)


def list_clients(
    ctx: typer.Context,
    zone: ZoneOption = None,
) -> None:
    """See all clients in the targeted UAA."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        clients = build_api(state, zone).list_clients()
    print_json(clients)


def delete_client(
    ctx: typer.Context,
    client_id: Annotated[str, typer.Argument(help="Client ID to delete")],
    zone: ZoneOption = None,
) -> None:
    """Delete a client registration."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        build_api(state, zone).delete_client(client_id)
    typer.secho(f"Successfully deleted client {client_id}.", fg=typer.colors.GREEN)
