"""UAA resource API built on the authorized request pipeline."""

from uaa.cli.api.client import UaaApi
from uaa.cli.api.models import GroupMember, ScimGroup, ScimUser, UaaClient

__all__ = [
    "GroupMember",
    "ScimGroup",
    "ScimUser",
    "UaaApi",
    "UaaClient",
]
