"""Implicit grant redirect capture.

A short-lived HTTP listener on ``localhost:<port>`` receives the browser
redirect carrying ``access_token``. The first valid callback is written into
the active target's session and releases the waiting command through a
one-shot ``threading.Event``.

States: IDLE -> LISTENING -> CAPTURED -> STOPPED, or IDLE -> ERROR when the
port cannot be bound.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Sequence
from urllib.parse import parse_qs, urlencode, urlsplit

from uaa.cli.errors import (
    CallbackTimeoutError,
    InvalidUrlError,
    LauncherError,
    ListenerBindError,
    UaaError,
)
from uaa.cli.grants.launcher import Launcher
from uaa.cli.session.models import GrantType, UaaContext
from uaa.cli.session.store import SessionStore

logger = logging.getLogger(__name__)

CALLBACK_HOST = "localhost"
SUCCESS_BODY = b"Access token received. You may close this window and return to the terminal.\n"
DUPLICATE_BODY = b"Access token already received. You may close this window.\n"

# Upper bound on how long wait() lets a slow launcher finish after capture
LAUNCH_JOIN_TIMEOUT = 5.0


class FlowState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    CAPTURED = "captured"
    STOPPED = "stopped"
    ERROR = "error"


def build_implicit_authorize_url(
    base_url: str, client_id: str, port: int, scopes: Sequence[str] = ()
) -> str:
    """Build the authorize URL that redirects back to the local listener.

    Scopes are comma-joined into a single percent-encoded ``scope`` value,
    omitted entirely when there are none.
    """
    if not base_url:
        raise InvalidUrlError("No target set. Run 'uaa target UAA_URL' first.")

    params = [
        ("client_id", client_id),
        ("redirect_uri", f"http://{CALLBACK_HOST}:{port}"),
        ("response_type", "token"),
    ]
    if scopes:
        params.append(("scope", ",".join(scopes)))

    return f"{base_url.rstrip('/')}/oauth/authorize?{urlencode(params)}"


class ImplicitGrantFlow:
    """One run of the implicit grant: listen, launch, capture, stop."""

    def __init__(
        self,
        store: SessionStore,
        launcher: Launcher,
        client_id: str,
        scopes: Sequence[str] = (),
        port: int = 8080,
        host: str = CALLBACK_HOST,
    ):
        self._store = store
        self._launcher = launcher
        self._client_id = client_id
        self._scopes = list(scopes)
        self._port = port
        self._host = host

        self._lock = threading.Lock()
        self._done = threading.Event()
        self._server: ThreadingHTTPServer | None = None
        self._server_thread: threading.Thread | None = None
        self._launch_thread: threading.Thread | None = None

        self._context: UaaContext | None = None
        self._error: UaaError | None = None
        self.state = FlowState.IDLE
        self.authorize_url: str | None = None
        self.launch_error: LauncherError | None = None

    def __enter__(self) -> "ImplicitGrantFlow":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> str:
        """Bind the listener, then launch the user agent on a side thread.

        Returns the authorize URL handed to the launcher.
        """
        config = self._store.load()
        self.authorize_url = build_implicit_authorize_url(
            config.get_active_target().base_url,
            self._client_id,
            self._port,
            self._scopes,
        )

        try:
            server = ThreadingHTTPServer((self._host, self._port), self._make_handler())
        except OSError as e:
            self.state = FlowState.ERROR
            raise ListenerBindError(
                f"Could not listen on {self._host}:{self._port}: {e}. "
                "Choose another port with --port."
            ) from e

        server.daemon_threads = True
        self._server = server
        self._server_thread = threading.Thread(
            target=server.serve_forever, name="implicit-grant-listener", daemon=True
        )
        self._server_thread.start()
        self.state = FlowState.LISTENING
        logger.info("Listening for implicit grant callback on %s:%d", self._host, self._port)

        self._launch_thread = threading.Thread(
            target=self._launch, name="implicit-grant-launcher", daemon=True
        )
        self._launch_thread.start()
        return self.authorize_url

    def wait(self, timeout: float | None = None) -> UaaContext:
        """Block until the callback has been captured and persisted.

        Blocks indefinitely when ``timeout`` is None.
        """
        if not self._done.wait(timeout):
            self.stop()
            raise CallbackTimeoutError(
                f"No callback received on http://{self._host}:{self._port} "
                f"within {timeout} seconds"
            )

        if self._launch_thread is not None:
            self._launch_thread.join(LAUNCH_JOIN_TIMEOUT)
        self.stop()

        if self._error is not None:
            raise self._error
        return self._context  # type: ignore[return-value]

    def stop(self) -> None:
        """Shut the listener down. Safe to call more than once."""
        server, self._server = self._server, None
        if server is not None:
            server.shutdown()
            server.server_close()
            logger.debug("Callback listener on port %d stopped", self._port)
        if self.state is not FlowState.ERROR:
            self.state = FlowState.STOPPED

    # -------------------------------------------------------------------------
    # Side channels
    # -------------------------------------------------------------------------

    def _launch(self) -> None:
        try:
            self._launcher.open(self.authorize_url)
        except LauncherError as e:
            self.launch_error = e
            logger.warning(
                "Could not open a browser (%s). Visit %s to continue.",
                e,
                self.authorize_url,
            )

    def _capture(
        self,
        access_token: str,
        token_type: str | None = None,
        scope: str | None = None,
        id_token: str | None = None,
    ) -> bool:
        """Store the token in the active context. Returns False if already captured."""
        with self._lock:
            if self._context is not None or self._error is not None:
                return False

            context = UaaContext(
                client_id=self._client_id,
                grant_type=GrantType.IMPLICIT,
                access_token=access_token,
                token_type=token_type,
                scope=scope,
                id_token=id_token,
            )
            try:
                config = self._store.load()
                config.add_context(context)
                self._store.save(config)
            except (OSError, UaaError) as e:
                self._error = e if isinstance(e, UaaError) else UaaError(
                    f"Could not save session to {self._store.path}: {e}"
                )
                raise

            self._context = context
            self.state = FlowState.CAPTURED
            logger.info("Captured access token for client %s", self._client_id)
            return True

    def _make_handler(self) -> type[BaseHTTPRequestHandler]:
        flow = self

        class CallbackHandler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:  # noqa: N802
                request = urlsplit(self.path)
                if request.path != "/":
                    self._reply(404, b"Not found\n")
                    return

                params = {k: v[0] for k, v in parse_qs(request.query).items()}
                token = params.get("access_token", "")
                if not token:
                    self._reply(400, b"Missing access_token parameter\n")
                    return

                try:
                    captured = flow._capture(
                        token,
                        token_type=params.get("token_type"),
                        scope=params.get("scope"),
                        id_token=params.get("id_token"),
                    )
                except (OSError, UaaError):
                    self._reply(500, b"Could not save the access token.\n")
                    flow._done.set()
                    return

                self._reply(200, SUCCESS_BODY if captured else DUPLICATE_BODY)
                if captured:
                    flow._done.set()

            def _reply(self, status: int, body: bytes) -> None:
                self.send_response(status)
                self.send_header("Content-Type", "text/plain; charset=utf-8")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format: str, *args: object) -> None:  # noqa: A002
                logger.debug("callback %s %s", self.address_string(), format % args)

        return CallbackHandler


def implicit_token_command(
    launcher: Launcher,
    scopes: Sequence[str],
    port: int,
    store: SessionStore | None = None,
    timeout: float | None = None,
) -> Callable[[Sequence[str]], UaaContext]:
    """Return a handler that runs the implicit grant for ``args[0]`` (client id)."""

    def run(args: Sequence[str]) -> UaaContext:
        if not args:
            raise UaaError("Missing argument `client_id` must be specified.")

        flow = ImplicitGrantFlow(
            store=store or SessionStore(),
            launcher=launcher,
            client_id=args[0],
            scopes=scopes,
            port=port,
        )
        flow.start()
        try:
            return flow.wait(timeout)
        finally:
            flow.stop()

    return run
