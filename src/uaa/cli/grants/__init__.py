"""Token acquisition flows."""

from uaa.cli.grants.implicit import (
    FlowState,
    ImplicitGrantFlow,
    build_implicit_authorize_url,
    implicit_token_command,
)
from uaa.cli.grants.launcher import BrowserLauncher, Launcher

__all__ = [
    "BrowserLauncher",
    "FlowState",
    "ImplicitGrantFlow",
    "Launcher",
    "build_implicit_authorize_url",
    "implicit_token_command",
]
