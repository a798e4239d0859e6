"""Helpers shared by the CLI commands."""

from __future__ import annotations

import json
import traceback
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Annotated, Any, Iterator, Optional

import typer
from pydantic import BaseModel

from uaa.cli.api.client import UaaApi
from uaa.cli.errors import MissingCredentialError, UaaAuthError, UaaError
from uaa.cli.session.models import SessionConfig
from uaa.cli.session.store import SessionStore
from uaa.cli.transport.curl import CurlManager
from uaa.cli.transport.trace import RequestTracer

ZoneOption = Annotated[
    Optional[str],
    typer.Option("--zone", "-z", help="Identity zone subdomain to act in"),
]


@dataclass
class CLIState:
    """Object stored on :class:`typer.Context` for command access."""

    verbose: bool = False


def get_state(ctx: typer.Context) -> CLIState:
    if isinstance(ctx.obj, CLIState):
        return ctx.obj
    return CLIState()


@contextmanager
def report_errors(verbose: bool = False) -> Iterator[None]:
    """Print UAA errors in red and exit non-zero."""
    try:
        yield
    except MissingCredentialError as e:
        typer.secho(f"Not authenticated: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except UaaAuthError as e:
        typer.secho(f"Authorization failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except UaaError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        if verbose:
            traceback.print_exc()
        raise typer.Exit(1)


def build_curl(config: SessionConfig, state: CLIState) -> CurlManager:
    return CurlManager(config, tracer=RequestTracer(enabled=state.verbose))


def build_api(state: CLIState, zone: str | None = None) -> UaaApi:
    """Load the session and build an API client for the active target."""
    config = SessionStore().load()
    return UaaApi(build_curl(config, state), zone_subdomain=zone)


def print_json(data: Any) -> None:
    """Pretty-print a model, list of models or plain JSON value."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True, exclude_none=True)
    elif isinstance(data, list):
        data = [
            d.model_dump(mode="json", by_alias=True, exclude_none=True)
            if isinstance(d, BaseModel)
            else d
            for d in data
        ]
    typer.echo(json.dumps(data, indent=2))


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated option into a list, dropping empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
