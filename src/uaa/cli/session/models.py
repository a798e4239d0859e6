"""Pydantic models for the persisted session.

Example YAML structure:
    active_target: https://uaa.example.com
    targets:
      https://uaa.example.com:
        base_url: https://uaa.example.com
        skip_ssl_validation: false
        zone_subdomain: tenant-a
        active_context: shinyclient
        contexts:
          shinyclient:
            client_id: shinyclient
            grant_type: implicit
            access_token: eyJhbGciOi...
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class GrantType(str, Enum):
    """OAuth2 flows a context can have been obtained with."""

    IMPLICIT = "implicit"
    PASSWORD = "password"
    CLIENT_CREDENTIALS = "client_credentials"
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class UaaContext(BaseModel):
    """An authenticated session bound to a target."""

    client_id: str = ""
    grant_type: GrantType | None = None
    username: str | None = None
    access_token: str = ""
    refresh_token: str | None = None
    id_token: str | None = None
    token_type: str | None = None
    scope: str | None = None

    @property
    def key(self) -> str:
        """Name the context is stored under on its target."""
        if self.username:
            return f"{self.client_id}|{self.username}"
        return self.client_id

    @property
    def has_token(self) -> bool:
        return bool(self.access_token)


class Target(BaseModel):
    """A remote UAA server instance."""

    base_url: str
    skip_ssl_validation: bool = False
    zone_subdomain: str | None = None
    active_context: str | None = None
    contexts: dict[str, UaaContext] = Field(default_factory=dict)

    def get_active_context(self) -> UaaContext:
        """Return the active context, or an empty one if none is set."""
        if self.active_context and self.active_context in self.contexts:
            return self.contexts[self.active_context]
        return UaaContext()

    def set_active_context(self, context: UaaContext) -> None:
        """Store a context (replacing any with the same key) and make it active."""
        self.contexts[context.key] = context
        self.active_context = context.key


class SessionConfig(BaseModel):
    """All known targets plus a pointer to the active one."""

    active_target: str | None = None
    targets: dict[str, Target] = Field(default_factory=dict)

    def get_active_target(self) -> Target:
        """Return the active target, or an empty one if none is set."""
        if self.active_target and self.active_target in self.targets:
            return self.targets[self.active_target]
        return Target(base_url="")

    def get_active_context(self) -> UaaContext:
        return self.get_active_target().get_active_context()

    def set_active_target(self, target: Target) -> None:
        """Add or update a target and make it active.

        Contexts already stored for the same base URL are preserved.
        """
        key = target.base_url
        existing = self.targets.get(key)
        if existing is not None and not target.contexts:
            target.contexts = existing.contexts
            target.active_context = existing.active_context
        self.targets[key] = target
        self.active_target = key

    def add_context(self, context: UaaContext) -> None:
        """Merge a freshly acquired credential into the active target."""
        target = self.get_active_target()
        target.set_active_context(context)
        if target.base_url:
            self.targets[target.base_url] = target
            self.active_target = target.base_url

    @classmethod
    def with_server_url(cls, url: str) -> "SessionConfig":
        """Build a session targeting a single server."""
        config = cls()
        config.set_active_target(Target(base_url=url))
        return config
