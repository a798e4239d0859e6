"""CLI tests driving the Typer app against a mocked UAA."""

import json

import httpx
import jwt
import pytest
from typer.testing import CliRunner

from conftest import FakeLauncher
from uaa.cli.commands import common, curl as curl_commands, target as target_commands, tokens
from uaa.cli.main import app
from uaa.cli.session.models import GrantType, SessionConfig
from uaa.cli.transport.curl import CurlManager

runner = CliRunner()


@pytest.fixture
def mock_uaa(monkeypatch, session_dir):
    """Route every command's HTTP traffic to a handler set by the test."""
    state = {"handler": None, "requests": []}

    def dispatch(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["handler"](request)

    def fake_build_curl(config, cli_state):
        client = httpx.Client(transport=httpx.MockTransport(dispatch))
        return CurlManager(config, http_client=client)

    for module in (common, target_commands, curl_commands):
        monkeypatch.setattr(module, "build_curl", fake_build_curl)
    return state


def _info(request):
    assert request.url.path == "/info"
    return httpx.Response(200, json={"app": {"version": "77.0.0"}})


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("target", "context", "get-implicit-token", "curl", "create-client"):
        assert command in result.output


# -------------------------------------------------------------------------
# target / context
# -------------------------------------------------------------------------


def test_target_set_saves_session(mock_uaa, store, server_url):
    mock_uaa["handler"] = _info

    result = runner.invoke(app, ["target", server_url + "/", "-k", "--zone", "tenant-a"])

    assert result.exit_code == 0, result.output
    assert f"Target set to {server_url}" in result.output
    target = store.load().get_active_target()
    assert target.base_url == server_url
    assert target.skip_ssl_validation is True
    assert target.zone_subdomain == "tenant-a"
    assert "Authorization" not in mock_uaa["requests"][0].headers


def test_target_unreachable_is_not_saved(mock_uaa, store, server_url):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    mock_uaa["handler"] = handler

    result = runner.invoke(app, ["target", server_url])

    assert result.exit_code == 1
    assert "is not responding and could not be set" in result.output
    assert not store.path.exists()


def test_target_show_reports_version(mock_uaa, store, server_url):
    store.save(SessionConfig.with_server_url(server_url))
    mock_uaa["handler"] = _info

    result = runner.invoke(app, ["target"])

    assert result.exit_code == 0
    assert f"Target: {server_url}" in result.output
    assert "Status: OK" in result.output
    assert "UAA Version: 77.0.0" in result.output


def test_context_prints_active_context(store, authed_config):
    store.save(authed_config)

    result = runner.invoke(app, ["context"])

    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["client_id"] == "shinyclient"
    assert output["access_token"] == "abc"


def test_context_claims_decodes_token(store, authed_config):
    token = jwt.encode(
        {"sub": "marcus", "client_id": "shinyclient"},
        "a-signing-key-long-enough-for-hs256-tokens",
        algorithm="HS256",
    )
    authed_config.get_active_context().access_token = token
    store.save(authed_config)

    result = runner.invoke(app, ["context", "--claims"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"sub": "marcus", "client_id": "shinyclient"}


def test_context_without_token(store, server_url):
    store.save(SessionConfig.with_server_url(server_url))

    result = runner.invoke(app, ["context"])

    assert result.exit_code == 1
    assert "No context is currently set" in result.output


# -------------------------------------------------------------------------
# curl
# -------------------------------------------------------------------------


def test_curl_prints_headers_then_body(mock_uaa, store, authed_config):
    authed_config.get_active_target().zone_subdomain = "tenant-a"
    store.save(authed_config)
    mock_uaa["handler"] = lambda request: httpx.Response(
        200, headers={"Content-Type": "application/json"}, text='{"resources": []}'
    )

    result = runner.invoke(
        app,
        ["curl", "/Users?count=5", "-X", "POST", "-H", "Accept: application/json", "-d", "{}"],
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "HTTP/1.1 200 OK"
    assert "Content-Type: application/json" in lines
    assert lines[-2:] == ["", '{"resources": []}']

    request = mock_uaa["requests"][0]
    assert request.method == "POST"
    assert str(request.url) == "http://uaa.example.com/Users?count=5"
    assert request.headers["Authorization"] == "bearer abc"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["X-Identity-Zone-Subdomain"] == "tenant-a"


def test_curl_zone_option_overrides_target_zone(mock_uaa, store, authed_config):
    store.save(authed_config)
    mock_uaa["handler"] = lambda request: httpx.Response(200)

    result = runner.invoke(app, ["curl", "/Users", "--zone", "tenant-b"])

    assert result.exit_code == 0
    assert mock_uaa["requests"][0].headers["X-Identity-Zone-Subdomain"] == "tenant-b"


def test_curl_without_token_fails_before_sending(mock_uaa, store, server_url):
    store.save(SessionConfig.with_server_url(server_url))

    result = runner.invoke(app, ["curl", "/Users"])

    assert result.exit_code == 1
    assert "Not authenticated" in result.output
    assert mock_uaa["requests"] == []


def test_curl_malformed_header(mock_uaa, store, authed_config):
    store.save(authed_config)

    result = runner.invoke(app, ["curl", "/Users", "-H", "no colon here"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert mock_uaa["requests"] == []


# -------------------------------------------------------------------------
# Resource commands
# -------------------------------------------------------------------------


def test_create_client_validation_error(mock_uaa, store, authed_config):
    store.save(authed_config)

    result = runner.invoke(
        app, ["create-client", "shinyclient", "--authorized_grant_types", "implicit"]
    )

    assert result.exit_code == 1
    assert "redirect_uri must be specified for implicit" in result.output
    assert mock_uaa["requests"] == []


def test_create_client_clones_existing(mock_uaa, store, authed_config):
    store.save(authed_config)

    def handler(request):
        if request.method == "GET":
            assert request.url.path == "/oauth/clients/template"
            return httpx.Response(
                200,
                json={
                    "client_id": "template",
                    "authorized_grant_types": ["client_credentials"],
                    "authorities": ["uaa.admin"],
                    "scope": ["uaa.none"],
                },
            )
        return httpx.Response(201, json=json.loads(request.content))

    mock_uaa["handler"] = handler

    result = runner.invoke(
        app, ["create-client", "copy", "-s", "s3cret", "--clone", "template", "--scope", "openid"]
    )

    assert result.exit_code == 0, result.output
    assert "The client copy has been successfully created." in result.output
    posted = json.loads(mock_uaa["requests"][1].content)
    assert posted["client_id"] == "copy"
    assert posted["client_secret"] == "s3cret"
    assert posted["authorities"] == ["uaa.admin"]
    assert posted["scope"] == ["openid"]


def test_create_client_clone_missing(mock_uaa, store, authed_config):
    store.save(authed_config)
    mock_uaa["handler"] = lambda request: httpx.Response(404)

    result = runner.invoke(
        app, ["create-client", "copy", "-s", "s3cret", "--clone", "nothere"]
    )

    assert result.exit_code == 1
    assert "The client nothere could not be found." in result.output


def test_list_clients_auth_failure(mock_uaa, store, authed_config):
    store.save(authed_config)
    mock_uaa["handler"] = lambda request: httpx.Response(403, text="insufficient_scope")

    result = runner.invoke(app, ["list-clients"])

    assert result.exit_code == 1
    assert "Authorization failed" in result.output


def test_add_member_resolves_group_and_user(mock_uaa, store, authed_config):
    store.save(authed_config)

    def handler(request):
        if request.url.path == "/Groups":
            return httpx.Response(200, json={"resources": [{"id": "g-1", "displayName": "admins"}]})
        if request.url.path == "/Users":
            return httpx.Response(
                200, json={"resources": [{"id": "u-1", "userName": "marcus", "origin": "ldap"}]}
            )
        assert request.url.path == "/Groups/g-1/members"
        return httpx.Response(201, json=json.loads(request.content))

    mock_uaa["handler"] = handler

    result = runner.invoke(app, ["add-member", "admins", "marcus"])

    assert result.exit_code == 0, result.output
    assert "User marcus successfully added to admins." in result.output
    assert json.loads(mock_uaa["requests"][-1].content) == {
        "origin": "ldap",
        "type": "USER",
        "value": "u-1",
    }


# -------------------------------------------------------------------------
# get-implicit-token
# -------------------------------------------------------------------------


def test_get_implicit_token_saves_context(monkeypatch, store, server_url, free_port):
    store.save(SessionConfig.with_server_url(server_url))

    def follow_redirect(uri):
        with httpx.Client(trust_env=False, timeout=5.0) as client:
            client.get(f"http://127.0.0.1:{free_port}/?access_token=foo&token_type=bearer")

    launcher = FakeLauncher(on_open=follow_redirect)
    monkeypatch.setattr(tokens, "BrowserLauncher", lambda: launcher)

    result = runner.invoke(
        app,
        ["get-implicit-token", "shinyclient", "--port", str(free_port), "--timeout", "5"],
    )

    assert result.exit_code == 0, result.output
    assert "Access token added to active context." in result.output
    assert launcher.uris[0].startswith(f"{server_url}/oauth/authorize?client_id=shinyclient")
    saved = store.load().get_active_context()
    assert saved.access_token == "foo"
    assert saved.grant_type == GrantType.IMPLICIT


def test_get_implicit_token_times_out(monkeypatch, store, server_url, free_port):
    store.save(SessionConfig.with_server_url(server_url))
    monkeypatch.setattr(tokens, "BrowserLauncher", FakeLauncher)

    result = runner.invoke(
        app,
        ["get-implicit-token", "shinyclient", "--port", str(free_port), "--timeout", "0.2"],
    )

    assert result.exit_code == 1
    assert "No callback received" in result.output
