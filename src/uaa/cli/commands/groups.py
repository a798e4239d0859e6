"""SCIM group commands.

Commands:
    uaa create-group GROUPNAME --description "..."
    uaa get-group GROUPNAME
    uaa list-groups
    uaa add-member GROUPNAME USERNAME
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from uaa.cli.api.models import ScimGroup
from uaa.cli.commands.common import ZoneOption, build_api, get_state, print_json, report_errors


def create_group(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Group display name")],
    description: Annotated[
        Optional[str],
        typer.Option("--description", "-d", help="a human-readable description"),
    ] = None,
    zone: ZoneOption = None,
) -> None:
    """Create a group."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        group = build_api(state, zone).create_group(
            ScimGroup(display_name=name, description=description)
        )
    print_json(group)


def get_group(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Group display name")],
    zone: ZoneOption = None,
) -> None:
    """Look up a group by name."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        group = build_api(state, zone).get_group_by_name(name)
    print_json(group)


def list_groups(
    ctx: typer.Context,
    filter: Annotated[
        Optional[str],
        typer.Option("--filter", help="SCIM filter expression"),
    ] = None,
    zone: ZoneOption = None,
) -> None:
    """Search and list groups with SCIM filters."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        groups = build_api(state, zone).list_groups(filter=filter)
    print_json(groups)


def add_member(
    ctx: typer.Context,
    group_name: Annotated[str, typer.Argument(help="Group display name")],
    username: Annotated[str, typer.Argument(help="Username to add")],
    zone: ZoneOption = None,
) -> None:
    """Add a user to a group."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        api = build_api(state, zone)
        group = api.get_group_by_name(group_name)
        user = api.get_user_by_username(username)
        api.add_group_member(group.id or "", user.id or "", origin=user.origin or "uaa")
    typer.secho(f"User {username} successfully added to {group_name}.", fg=typer.colors.GREEN)
