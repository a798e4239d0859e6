"""UAA REST API client.

Wraps the UAA endpoints used by the resource commands:
- Server info
- OAuth clients (/oauth/clients)
- SCIM users (/Users)
- SCIM groups (/Groups)

Every call goes through :class:`CurlManager`, so requests carry the active
context's bearer token and the configured zone-switch header.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from uaa.cli.api.models import GroupMember, ScimGroup, ScimUser, UaaClient
from uaa.cli.errors import (
    UaaAuthError,
    UaaConflictError,
    UaaError,
    UaaNotFoundError,
)
from uaa.cli.transport.curl import CurlManager

logger = logging.getLogger(__name__)

JSON_HEADERS = ["Accept: application/json", "Content-Type: application/json"]


def _scim_filter(**criteria: str) -> str:
    """Build a URL-encoded SCIM ``eq`` filter joining criteria with ``and``."""
    clauses = []
    for attribute, value in criteria.items():
        escaped = value.replace('"', '\\"')
        clauses.append(f'{attribute} eq "{escaped}"')
    return quote(" and ".join(clauses))


class UaaApi:
    """Synchronous client for the UAA REST API."""

    def __init__(self, curl: CurlManager, zone_subdomain: str | None = None):
        self._curl = curl
        self._zone_subdomain = zone_subdomain

    # -------------------------------------------------------------------------
    # HTTP helpers
    # -------------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        expected_status: list[int] | None = None,
        authenticated: bool = True,
    ) -> Any:
        data = json.dumps(json_body) if json_body is not None else ""
        response = self._curl.execute(
            path,
            method=method,
            data=data,
            headers=JSON_HEADERS,
            zone_subdomain=self._zone_subdomain,
            authenticated=authenticated,
        )
        return self._handle_response(response, expected_status)

    def _handle_response(
        self,
        response: httpx.Response,
        expected_status: list[int] | None = None,
    ) -> Any:
        """Handle API response."""
        expected = expected_status or [200]

        if response.status_code == 404:
            raise UaaNotFoundError(
                f"Resource not found: {response.request.url}",
                status_code=404,
                response=response.text,
            )

        if response.status_code == 409:
            raise UaaConflictError(
                f"Resource already exists: {response.text}",
                status_code=409,
                response=response.text,
            )

        if response.status_code in (401, 403):
            raise UaaAuthError(
                f"Access denied ({response.status_code}): {response.text}. "
                "Your token may be expired or lack the required scopes.",
                status_code=response.status_code,
                response=response.text,
            )

        if response.status_code not in expected:
            raise UaaError(
                f"Unexpected response {response.status_code}: {response.text}",
                status_code=response.status_code,
                response=response.text,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise UaaError(
                f"Response from {response.request.url} is not JSON: {e}",
                status_code=response.status_code,
                response=response.text,
            ) from e

    # -------------------------------------------------------------------------
    # Info
    # -------------------------------------------------------------------------

    def info(self) -> dict[str, Any]:
        """Fetch server metadata (version, links, zone name)."""
        return self._request("GET", "/info", authenticated=False)

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    def get_client(self, client_id: str) -> UaaClient:
        payload = self._request("GET", f"/oauth/clients/{quote(client_id, safe='')}")
        return UaaClient.model_validate(payload)

    def list_clients(self) -> list[UaaClient]:
        payload = self._request("GET", "/oauth/clients") or {}
        return [UaaClient.model_validate(c) for c in payload.get("resources", [])]

    def create_client(self, client: UaaClient) -> UaaClient:
        """Validate and register a client."""
        client.validate_grants()
        logger.debug("Creating client: %s", client.client_id)
        payload = self._request(
            "POST", "/oauth/clients", json_body=client.to_payload(), expected_status=[200, 201]
        )
        logger.info("Created client: %s", client.client_id)
        return UaaClient.model_validate(payload)

    def delete_client(self, client_id: str) -> UaaClient | None:
        logger.debug("Deleting client: %s", client_id)
        payload = self._request(
            "DELETE", f"/oauth/clients/{quote(client_id, safe='')}", expected_status=[200, 204]
        )
        logger.info("Deleted client: %s", client_id)
        return UaaClient.model_validate(payload) if payload else None

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user_by_username(self, username: str, origin: str | None = None) -> ScimUser:
        if origin:
            query = _scim_filter(userName=username, origin=origin)
        else:
            query = _scim_filter(userName=username)
        payload = self._request("GET", f"/Users?filter={query}") or {}
        resources = payload.get("resources", [])
        if not resources:
            raise UaaNotFoundError(f"User {username} not found.", status_code=404)
        if len(resources) > 1:
            raise UaaError(
                f"Found {len(resources)} users named {username}. Specify an origin to disambiguate."
            )
        return ScimUser.model_validate(resources[0])

    def list_users(self, filter: str | None = None) -> list[ScimUser]:
        path = "/Users"
        if filter:
            path += f"?filter={quote(filter)}"
        payload = self._request("GET", path) or {}
        return [ScimUser.model_validate(u) for u in payload.get("resources", [])]

    def create_user(self, user: ScimUser) -> ScimUser:
        logger.debug("Creating user: %s", user.user_name)
        payload = self._request(
            "POST", "/Users", json_body=user.to_payload(), expected_status=[200, 201]
        )
        logger.info("Created user: %s", user.user_name)
        return ScimUser.model_validate(payload)

    def delete_user(self, user_id: str) -> None:
        logger.debug("Deleting user: %s", user_id)
        self._request("DELETE", f"/Users/{quote(user_id, safe='')}", expected_status=[200, 204])
        logger.info("Deleted user: %s", user_id)

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    def get_group_by_name(self, name: str) -> ScimGroup:
        payload = self._request("GET", f"/Groups?filter={_scim_filter(displayName=name)}") or {}
        resources = payload.get("resources", [])
        if not resources:
            raise UaaNotFoundError(f"Group {name} not found.", status_code=404)
        return ScimGroup.model_validate(resources[0])

    def list_groups(self, filter: str | None = None) -> list[ScimGroup]:
        path = "/Groups"
        if filter:
            path += f"?filter={quote(filter)}"
        payload = self._request("GET", path) or {}
        return [ScimGroup.model_validate(g) for g in payload.get("resources", [])]

    def create_group(self, group: ScimGroup) -> ScimGroup:
        logger.debug("Creating group: %s", group.display_name)
        payload = self._request(
            "POST", "/Groups", json_body=group.to_payload(), expected_status=[200, 201]
        )
        logger.info("Created group: %s", group.display_name)
        return ScimGroup.model_validate(payload)

    def add_group_member(self, group_id: str, user_id: str, origin: str = "uaa") -> GroupMember:
        member = GroupMember(origin=origin, value=user_id)
        logger.debug("Adding user %s to group %s", user_id, group_id)
        payload = self._request(
            "POST",
            f"/Groups/{quote(group_id, safe='')}/members",
            json_body=member.model_dump(),
            expected_status=[200, 201],
        )
        return GroupMember.model_validate(payload) if payload else member
