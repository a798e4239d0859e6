"""Request decorators applied after caller headers, so their values win."""

from __future__ import annotations

import httpx

from uaa.cli.errors import MissingCredentialError
from uaa.cli.session.models import UaaContext

ZONE_SWITCH_HEADER = "X-Identity-Zone-Subdomain"


def authorize(request: httpx.Request, context: UaaContext | None) -> httpx.Request:
    """Set the bearer Authorization header from the context's access token."""
    if context is None or not context.access_token:
        raise MissingCredentialError(
            f"An access token is required to call {request.url}. "
            "Run 'uaa get-implicit-token' or another login command first."
        )

    request.headers["Authorization"] = f"bearer {context.access_token}"
    return request


def add_zone_switch_header(
    request: httpx.Request, zone_subdomain: str | None
) -> httpx.Request:
    """Set the identity-zone switch header when a subdomain is configured."""
    if zone_subdomain:
        request.headers[ZONE_SWITCH_HEADER] = zone_subdomain
    return request
