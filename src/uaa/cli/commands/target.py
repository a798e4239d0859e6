"""Target and context commands.

Commands:
    uaa target [UAA_URL]
    uaa context
"""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import jwt
import typer

from uaa.cli.api.client import UaaApi
from uaa.cli.commands.common import build_curl, get_state, print_json, report_errors
from uaa.cli.errors import MissingCredentialError, UaaError
from uaa.cli.session.models import SessionConfig, Target
from uaa.cli.session.store import SessionStore

logger = logging.getLogger(__name__)


def _print_target(url: str, status: str, version: str) -> None:
    typer.echo(f"Target: {url}")
    typer.echo(f"Status: {status}")
    typer.echo(f"UAA Version: {version}")


def target(
    ctx: typer.Context,
    url: Annotated[
        Optional[str],
        typer.Argument(help="UAA base URL, e.g. https://uaa.example.com"),
    ] = None,
    skip_ssl_validation: Annotated[
        bool,
        typer.Option("--skip-ssl-validation", "-k", help="Disable TLS certificate validation"),
    ] = False,
    zone: Annotated[
        Optional[str],
        typer.Option("--zone", "-z", help="Identity zone subdomain for all requests"),
    ] = None,
) -> None:
    """Set the URL of the UAA you'd like to target, or show the current target."""
    state = get_state(ctx)
    store = SessionStore()

    with report_errors(state.verbose):
        config = store.load()

        if url is None:
            current = config.get_active_target()
            if not current.base_url:
                _print_target("", "", "")
                return
            try:
                info = UaaApi(build_curl(config, state)).info() or {}
            except UaaError as e:
                logger.debug("Target check failed: %s", e)
                _print_target(current.base_url, "ERROR", "unknown")
                raise typer.Exit(1)
            _print_target(current.base_url, "OK", info.get("app", {}).get("version", "unknown"))
            return

        candidate = config.model_copy(deep=True)
        candidate.set_active_target(
            Target(
                base_url=url.rstrip("/"),
                skip_ssl_validation=skip_ssl_validation,
                zone_subdomain=zone,
            )
        )
        try:
            UaaApi(build_curl(candidate, state)).info()
        except UaaError as e:
            logger.debug("Target check failed: %s", e)
            typer.secho(
                f"The target {url} is not responding and could not be set.",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)

        store.save(candidate)
        typer.echo(f"Target set to {url}")


def context(
    ctx: typer.Context,
    claims: Annotated[
        bool,
        typer.Option("--claims", help="Show the decoded access token claims instead"),
    ] = False,
) -> None:
    """See information about the currently active CLI context."""
    state = get_state(ctx)

    with report_errors(state.verbose):
        config: SessionConfig = SessionStore().load()
        active = config.get_active_context()
        if not active.has_token:
            raise MissingCredentialError(
                "No context is currently set. "
                "To get a token, run 'uaa get-implicit-token CLIENT_ID'."
            )

        if not claims:
            print_json(active)
            return

        try:
            decoded = jwt.decode(
                active.access_token,
                options={"verify_signature": False},
            )
        except jwt.DecodeError as e:
            raise UaaError(f"The access token is not a decodable JWT: {e}") from e
        print_json(decoded)
