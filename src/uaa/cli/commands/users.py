"""SCIM user commands.

Commands:
    uaa create-user USERNAME --password secret --email user@example.com
    uaa get-user USERNAME
    uaa list-users --filter 'origin eq "uaa"'
    uaa delete-user USERNAME
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from uaa.cli.api.models import ScimUser, UserEmail, UserName
from uaa.cli.commands.common import ZoneOption, build_api, get_state, print_json, report_errors

OriginOption = Annotated[
    Optional[str],
    typer.Option("--origin", "-o", help="Identity provider the user belongs to"),
]


def create_user(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Username")],
    password: Annotated[
        Optional[str],
        typer.Option("--password", "-p", help="user password (required for uaa origin)"),
    ] = None,
    email: Annotated[
        Optional[list[str]],
        typer.Option("--email", help="email address (repeatable; first is primary)"),
    ] = None,
    given_name: Annotated[
        Optional[str],
        typer.Option("--givenName", help="given name"),
    ] = None,
    family_name: Annotated[
        Optional[str],
        typer.Option("--familyName", help="family name"),
    ] = None,
    origin: Annotated[
        str,
        typer.Option("--origin", "-o", help="Identity provider in which to create the user"),
    ] = "uaa",
    zone: ZoneOption = None,
) -> None:
    """Create a user."""
    state = get_state(ctx)

    emails = [UserEmail(value=addr, primary=i == 0) for i, addr in enumerate(email or [])]
    name = None
    if given_name or family_name:
        name = UserName(given_name=given_name, family_name=family_name)

    user = ScimUser(
        user_name=username,
        password=password,
        origin=origin,
        name=name,
        emails=emails,
    )

    with report_errors(state.verbose):
        created = build_api(state, zone).create_user(user)
    print_json(created)


def get_user(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Username")],
    origin: OriginOption = None,
    zone: ZoneOption = None,
) -> None:
    """Look up a user by username."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        user = build_api(state, zone).get_user_by_username(username, origin=origin)
    print_json(user)


def list_users(
    ctx: typer.Context,
    filter: Annotated[
        Optional[str],
        typer.Option("--filter", help="SCIM filter expression"),
    ] = None,
    zone: ZoneOption = None,
) -> None:
    """Search and list users with SCIM filters."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        users = build_api(state, zone).list_users(filter=filter)
    print_json(users)


def delete_user(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Username")],
    origin: OriginOption = None,
    zone: ZoneOption = None,
) -> None:
    """Delete a user by username."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        api = build_api(state, zone)
        user = api.get_user_by_username(username, origin=origin)
        api.delete_user(user.id or "")
    typer.secho(f"Account for user {username} successfully deleted.", fg=typer.colors.GREEN)
