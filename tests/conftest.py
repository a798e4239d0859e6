"""Pytest configuration and fixtures."""

import socket
import threading
from pathlib import Path

import httpx
import pytest

from uaa.cli.config import settings
from uaa.cli.session.models import GrantType, SessionConfig, Target, UaaContext
from uaa.cli.session.store import SessionStore

SERVER_URL = "http://uaa.example.com"


class FakeLauncher:
    """Records the URIs it was asked to open instead of starting a browser."""

    def __init__(self, error: Exception | None = None, on_open=None):
        self.uris: list[str] = []
        self.opened = threading.Event()
        self._error = error
        self._on_open = on_open

    def open(self, uri: str) -> None:
        self.uris.append(uri)
        self.opened.set()
        if self._on_open is not None:
            self._on_open(uri)
        if self._error is not None:
            raise self._error


@pytest.fixture
def server_url() -> str:
    return SERVER_URL


@pytest.fixture
def session_dir(tmp_path, monkeypatch) -> Path:
    """Point the default session store at a temporary directory."""
    config_dir = tmp_path / ".uaa"
    monkeypatch.setattr(settings, "config_dir", config_dir)
    return config_dir


@pytest.fixture
def store(session_dir) -> SessionStore:
    return SessionStore()


@pytest.fixture
def authed_config() -> SessionConfig:
    """A session with an active target and an implicit-grant token."""
    config = SessionConfig()
    config.set_active_target(Target(base_url=SERVER_URL))
    config.add_context(
        UaaContext(
            client_id="shinyclient",
            grant_type=GrantType.IMPLICIT,
            access_token="abc",
        )
    )
    return config


@pytest.fixture
def free_port() -> int:
    """A local TCP port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def callback_client():
    """HTTP client playing the browser that follows the redirect."""
    with httpx.Client(trust_env=False, timeout=5.0) as client:
        yield client
