"""Caller-supplied header merging.

Raw header lines (``Name: value``) are parsed with MIME header rules and
overlaid onto a request's headers. A name present in the block replaces every
existing value for that name; a name repeated inside the block keeps all of
its values.
"""

from __future__ import annotations

import re

import httpx

from uaa.cli.errors import ParseError

# RFC 7230 token characters
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def parse_header_block(raw: str) -> list[tuple[str, str]]:
    """Parse a block of ``Name: value`` lines into (name, value) pairs.

    The block ends at the first blank line. Lines starting with a space or tab
    continue the previous value.

    Raises:
        ParseError: a line has no colon or an invalid name.
    """
    block = raw.strip() + "\n\n"
    pairs: list[tuple[str, str]] = []

    for line in block.split("\n"):
        line = line.rstrip("\r")
        if not line:
            break

        # The stripped block never opens with whitespace, so pairs is non-empty here
        if line[0] in " \t":
            name, value = pairs[-1]
            pairs[-1] = (name, f"{value} {line.strip()}".strip())
            continue

        name, sep, value = line.partition(":")
        if not sep:
            raise ParseError(f"malformed MIME header line: {line!r}")
        if not _HEADER_NAME.match(name):
            raise ParseError(f"malformed MIME header name: {name!r}")
        pairs.append((name, value.strip()))

    return pairs


def merge_headers(destination: httpx.Headers, raw: str) -> None:
    """Overlay the headers in ``raw`` onto ``destination`` in place.

    ``destination`` is untouched if ``raw`` fails to parse.
    """
    # httpx encodes str values as ASCII, so pass UTF-8 bytes
    parsed = httpx.Headers(
        [(name, value.encode("utf-8")) for name, value in parse_header_block(raw)]
    )

    for name in parsed.keys():
        if name in destination:
            del destination[name]

    # update() appends every value of a multi-valued name
    destination.update(parsed)
