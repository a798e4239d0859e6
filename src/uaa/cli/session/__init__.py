"""Persisted targets and authenticated contexts."""

from uaa.cli.session.models import GrantType, SessionConfig, Target, UaaContext
from uaa.cli.session.store import SessionStore

__all__ = [
    "GrantType",
    "SessionConfig",
    "SessionStore",
    "Target",
    "UaaContext",
]
