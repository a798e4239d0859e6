"""Structured tracing of outbound requests."""

from typing import Any

import httpx
import structlog

REDACTED = "[REDACTED]"
_SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie"}


def redact_headers(headers: httpx.Headers) -> dict[str, str]:
    """Return headers as a dict, keeping name case, with credential values masked."""
    encoding = headers.encoding
    redacted = {}
    for raw_name, raw_value in headers.raw:
        name = raw_name.decode(encoding)
        if name.lower() in _SENSITIVE_HEADERS:
            redacted[name] = REDACTED
        else:
            redacted[name] = raw_value.decode(encoding)
    return redacted


class RequestTracer:
    """Logs one event per request and per response."""

    def __init__(self, enabled: bool = True, logger: Any = None):
        """Initialize request tracer.

        Args:
            enabled: Whether tracing is enabled
            logger: Optional custom logger
        """
        self._enabled = enabled
        self._logger = logger or structlog.get_logger("uaa.http")

    def log_request(self, request: httpx.Request) -> None:
        if not self._enabled:
            return

        self._logger.debug(
            "http_request",
            method=request.method,
            url=str(request.url),
            headers=redact_headers(request.headers),
        )

    def log_response(self, response: httpx.Response, latency_ms: float) -> None:
        if not self._enabled:
            return

        self._logger.debug(
            "http_response",
            method=response.request.method,
            url=str(response.request.url),
            status=response.status_code,
            latency_ms=round(latency_ms, 2),
            headers=redact_headers(response.headers),
        )

    def log_error(self, request: httpx.Request, error: str) -> None:
        if not self._enabled:
            return

        self._logger.warning(
            "http_error",
            method=request.method,
            url=str(request.url),
            error=error,
        )
