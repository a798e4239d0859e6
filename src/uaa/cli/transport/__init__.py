"""Authorized request pipeline."""

from uaa.cli.transport.auth import ZONE_SWITCH_HEADER, add_zone_switch_header, authorize
from uaa.cli.transport.curl import CurlManager, CurlResponse, build_url
from uaa.cli.transport.headers import merge_headers, parse_header_block
from uaa.cli.transport.trace import RequestTracer

__all__ = [
    "ZONE_SWITCH_HEADER",
    "CurlManager",
    "CurlResponse",
    "RequestTracer",
    "add_zone_switch_header",
    "authorize",
    "build_url",
    "merge_headers",
    "parse_header_block",
]
