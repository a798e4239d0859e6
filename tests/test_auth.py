import httpx
import pytest

from uaa.cli.errors import MissingCredentialError
from uaa.cli.session.models import UaaContext
from uaa.cli.transport.auth import ZONE_SWITCH_HEADER, add_zone_switch_header, authorize


def _request() -> httpx.Request:
    return httpx.Request("GET", "http://uaa.example.com/Users")


def test_authorize_sets_bearer_header():
    request = authorize(_request(), UaaContext(client_id="c", access_token="abc"))
    assert request.headers["Authorization"] == "bearer abc"


def test_authorize_replaces_existing_authorization():
    request = _request()
    request.headers["Authorization"] = "Basic Zm9vOmJhcg=="

    authorize(request, UaaContext(access_token="abc"))

    assert request.headers.get_list("authorization") == ["bearer abc"]


@pytest.mark.parametrize("context", [None, UaaContext(client_id="c")])
def test_authorize_without_token_raises(context):
    with pytest.raises(MissingCredentialError) as e:
        authorize(_request(), context)
    assert "http://uaa.example.com/Users" in str(e.value)


def test_zone_header_added_when_configured():
    request = add_zone_switch_header(_request(), "tenant-a")
    assert request.headers[ZONE_SWITCH_HEADER] == "tenant-a"


@pytest.mark.parametrize("zone", [None, ""])
def test_zone_header_noop_without_subdomain(zone):
    request = add_zone_switch_header(_request(), zone)
    assert ZONE_SWITCH_HEADER not in request.headers
