"""CLI configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """CLI settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="UAA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Session store
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".uaa")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    json_logs: bool = False

    # HTTP
    timeout: float = 30.0  # seconds

    # Implicit grant
    callback_port: int = 8080

    @property
    def config_path(self) -> Path:
        """Path of the persisted session file."""
        return self.config_dir / "config.yaml"


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Alias for the module-level settings singleton."""
    return settings
