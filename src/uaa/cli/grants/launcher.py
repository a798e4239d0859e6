"""User-agent launchers.

The implicit grant flow only needs "open this URI somewhere the user can log
in". Production opens the system browser; tests record the URI instead.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Protocol

from uaa.cli.errors import LauncherError

logger = logging.getLogger(__name__)


class Launcher(Protocol):
    def open(self, uri: str) -> None:
        """Open ``uri`` in a user agent. Raises LauncherError on failure."""
        ...


class BrowserLauncher:
    """Opens URIs in the user's default web browser."""

    def open(self, uri: str) -> None:
        logger.debug("Opening browser at %s", uri)
        try:
            opened = webbrowser.open(uri, new=2)
        except webbrowser.Error as e:
            raise LauncherError(f"Could not open a browser: {e}") from e
        if not opened:
            raise LauncherError("No runnable browser found")
