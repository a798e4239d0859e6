"""Exception hierarchy shared by the request pipeline, grant flows and commands."""

from __future__ import annotations


class UaaError(Exception):
    """Base exception for UAA CLI errors."""

    def __init__(
        self, message: str, status_code: int | None = None, response: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class InvalidUrlError(UaaError):
    """Target base URL or request path could not be turned into a URL."""

    pass


class ParseError(UaaError):
    """Raw header block is not valid MIME header syntax."""

    pass


class MissingCredentialError(UaaError):
    """The active context has no access token."""

    pass


class NetworkError(UaaError):
    """Transport failure: connection refused, timeout, TLS error."""

    pass


class ListenerBindError(UaaError):
    """The local callback listener could not bind its port."""

    pass


class LauncherError(UaaError):
    """The user agent could not be opened."""

    pass


class CallbackTimeoutError(UaaError):
    """No browser callback arrived before the caller's deadline."""

    pass


class UaaAuthError(UaaError):
    """Server rejected the credential (401/403)."""

    pass


class UaaNotFoundError(UaaError):
    """Resource not found."""

    pass


class UaaConflictError(UaaError):
    """Resource already exists."""

    pass


class ClientValidationError(UaaError):
    """Client registration is not valid for its grant types."""

    pass
