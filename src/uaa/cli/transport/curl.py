"""Authorized request executor.

Builds a request against the active target, overlays caller headers, then
applies the Authorization and zone-switch decorators (which therefore win over
any caller header with the same name) and returns the raw response.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Sequence

import httpx

from uaa.cli.config import settings
from uaa.cli.errors import InvalidUrlError, NetworkError
from uaa.cli.session.models import SessionConfig
from uaa.cli.transport.auth import add_zone_switch_header, authorize
from uaa.cli.transport.headers import merge_headers
from uaa.cli.transport.trace import RequestTracer

logger = logging.getLogger(__name__)

USER_AGENT = "uaa-cli"


@dataclass(frozen=True)
class CurlResponse:
    """Raw response capture: header block and body, both unparsed."""

    headers: str
    body: str


def build_url(base_url: str, path: str) -> httpx.URL:
    """Join ``path`` (optionally carrying a query string) onto ``base_url``.

    Any path already on the base URL is kept as a prefix.
    """
    if not base_url:
        raise InvalidUrlError("No target set. Run 'uaa target UAA_URL' first.")

    try:
        base = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise InvalidUrlError(f"Invalid target URL {base_url!r}: {e}") from e

    if base.scheme not in ("http", "https") or not base.host:
        raise InvalidUrlError(f"Invalid target URL {base_url!r}: expected http(s)://host")

    raw_path, _, query = path.partition("?")
    segments = [p.strip("/") for p in (base.path, raw_path) if p.strip("/")]
    joined = "/" + "/".join(segments)

    try:
        return base.copy_with(
            path=joined,
            query=query.encode() if query else None,
            fragment=None,
        )
    except httpx.InvalidURL as e:
        raise InvalidUrlError(f"Invalid request path {path!r}: {e}") from e


def dump_response_headers(response: httpx.Response) -> str:
    """Serialize the status line and header block, without the body."""
    encoding = response.headers.encoding
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(
        f"{name.decode(encoding)}: {value.decode(encoding)}"
        for name, value in response.headers.raw
    )
    return "\r\n".join(lines) + "\r\n\r\n"


class CurlManager:
    """Issues authenticated requests against the active target."""

    def __init__(
        self,
        config: SessionConfig,
        http_client: httpx.Client | None = None,
        tracer: RequestTracer | None = None,
        timeout: float | None = None,
    ):
        self._config = config
        self._http_client = http_client
        self._tracer = tracer or RequestTracer()
        self._timeout = timeout if timeout is not None else settings.timeout

    @property
    def config(self) -> SessionConfig:
        return self._config

    def build_request(
        self,
        path: str,
        method: str = "GET",
        data: str = "",
        headers: Sequence[str] | None = None,
        zone_subdomain: str | None = None,
        authenticated: bool = True,
    ) -> httpx.Request:
        """Build and decorate a request without sending it.

        ``authenticated=False`` skips the Authorization header, for public
        endpoints such as ``/info``.
        """
        target = self._config.get_active_target()
        context = target.get_active_context()

        url = build_url(target.base_url, path)
        request = httpx.Request(
            method.upper(),
            url,
            headers={"User-Agent": USER_AGENT},
            content=data.encode("utf-8") if data else None,
        )

        merge_headers(request.headers, "\n".join(headers or []))
        if authenticated:
            authorize(request, context)
        add_zone_switch_header(request, zone_subdomain or target.zone_subdomain)
        return request

    def execute(
        self,
        path: str,
        method: str = "GET",
        data: str = "",
        headers: Sequence[str] | None = None,
        zone_subdomain: str | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        """Send a request and return the fully read response."""
        request = self.build_request(
            path, method, data, headers, zone_subdomain, authenticated
        )
        target = self._config.get_active_target()

        client = self._http_client
        owns_client = client is None
        if client is None:
            client = httpx.Client(
                verify=not target.skip_ssl_validation,
                timeout=self._timeout,
            )

        self._tracer.log_request(request)
        start = time.perf_counter()
        try:
            response = client.send(request)
        except httpx.RequestError as e:
            self._tracer.log_error(request, str(e))
            raise NetworkError(f"{request.method} {request.url} failed: {e}") from e
        finally:
            if owns_client:
                client.close()

        self._tracer.log_response(response, (time.perf_counter() - start) * 1000)
        return response

    def curl(
        self,
        path: str,
        method: str = "GET",
        data: str = "",
        headers: Sequence[str] | None = None,
        zone_subdomain: str | None = None,
    ) -> CurlResponse:
        """Send an authorized request and capture the raw header block and body."""
        response = self.execute(path, method, data, headers, zone_subdomain)
        return CurlResponse(
            headers=dump_response_headers(response),
            body=response.text,
        )
