"""Pydantic models for UAA resources.

Field names follow the UAA JSON wire format so payloads round-trip through
``model_dump(by_alias=True)`` without translation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from uaa.cli.errors import ClientValidationError
from uaa.cli.session.models import GrantType

# Grant types that authenticate the client itself
_SECRET_REQUIRED = {
    GrantType.CLIENT_CREDENTIALS.value,
    GrantType.AUTHORIZATION_CODE.value,
    GrantType.PASSWORD.value,
    GrantType.REFRESH_TOKEN.value,
}
_REDIRECT_REQUIRED = {GrantType.AUTHORIZATION_CODE.value, GrantType.IMPLICIT.value}


class UaaClient(BaseModel):
    """An OAuth client registration."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    client_id: str
    client_secret: str | None = None
    display_name: str | None = Field(default=None, alias="name")
    authorized_grant_types: list[str] = Field(default_factory=list)
    authorities: list[str] = Field(default_factory=list)
    redirect_uri: list[str] = Field(default_factory=list)
    scope: list[str] = Field(default_factory=list)
    access_token_validity: int | None = None
    refresh_token_validity: int | None = None
    autoapprove: bool | list[str] | None = None

    def validate_grants(self) -> None:
        """Check the registration is consistent with its grant types."""
        valid = [g.value for g in GrantType]
        if not self.authorized_grant_types:
            raise ClientValidationError(f"grant type must be one of {valid}")

        for grant in self.authorized_grant_types:
            if grant not in valid:
                raise ClientValidationError(
                    f"{grant} is not a valid grant type; expected one of {valid}"
                )
            if grant == GrantType.IMPLICIT.value and self.client_secret:
                raise ClientValidationError(
                    "cannot create implicit client with client secret"
                )
            if grant in _REDIRECT_REQUIRED and not self.redirect_uri:
                raise ClientValidationError(
                    f"redirect_uri must be specified for {grant} grant type"
                )
            if grant in _SECRET_REQUIRED and not self.client_secret:
                raise ClientValidationError(
                    f"client_secret must be specified for {grant} grant type"
                )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class UserEmail(BaseModel):
    value: str
    primary: bool = False


class UserName(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    given_name: str | None = Field(default=None, alias="givenName")
    family_name: str | None = Field(default=None, alias="familyName")


class ScimUser(BaseModel):
    """A SCIM user."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    user_name: str = Field(alias="userName")
    password: str | None = None
    origin: str | None = None
    name: UserName | None = None
    emails: list[UserEmail] = Field(default_factory=list)
    active: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class GroupMember(BaseModel):
    origin: str = "uaa"
    type: str = "USER"
    value: str


class ScimGroup(BaseModel):
    """A SCIM group."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    display_name: str = Field(alias="displayName")
    description: str | None = None
    members: list[GroupMember] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
