"""YAML-backed session store.

The session file is read once per command invocation and written back with a
write-temp-then-rename so an interrupted write never leaves a truncated file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import yaml
from pydantic import ValidationError

from uaa.cli.config import get_settings
from uaa.cli.errors import UaaError
from uaa.cli.session.models import SessionConfig

logger = logging.getLogger(__name__)


class SessionStore:
    """Loads and persists :class:`SessionConfig` at a fixed path."""

    def __init__(self, path: Path | None = None):
        self._path = Path(path) if path is not None else get_settings().config_path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SessionConfig:
        """Read the session file. A missing or empty file yields an empty session."""
        if not self._path.exists():
            logger.debug("No session file at %s", self._path)
            return SessionConfig()

        try:
            raw = yaml.safe_load(self._path.read_text()) or {}
        except yaml.YAMLError as e:
            raise UaaError(f"Session file {self._path} is not valid YAML: {e}") from e

        if not isinstance(raw, dict):
            raise UaaError(f"Session file must be a YAML mapping: {self._path}")

        try:
            return SessionConfig.model_validate(raw)
        except ValidationError as e:
            raise UaaError(f"Session file {self._path} is invalid: {e}") from e

    def save(self, config: SessionConfig) -> None:
        """Atomically replace the session file with ``config``."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.safe_dump(
            config.model_dump(mode="json", exclude_none=True),
            default_flow_style=False,
            sort_keys=False,
        )

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as fh:
                fh.write(content)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Saved session to %s", self._path)
