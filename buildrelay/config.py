"""Relay configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support. Reads from .env file and BUILDRELAY_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9838

# Cache file consumed by the display's module-inspection features.
CACHE_FILENAME = Path.home() / ".buildrelay-cache.db"


class RelaySettings(BaseSettings):
    """Relay configuration with environment variable overrides.

    All settings can be overridden via BUILDRELAY_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export BUILDRELAY_HOST=10.0.0.5
        export BUILDRELAY_PORT=9900
        export BUILDRELAY_LOG_LEVEL=DEBUG

    Or via .env file::

        BUILDRELAY_ROOT=/srv/app
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDRELAY_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Display process endpoint
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    # Project root override (skips inference when set)
    root: Path | None = None

    # Manifest probed by project root inference
    manifest_name: str = "package.json"

    log_level: str = "INFO"

    @property
    def url(self) -> str:
        """Socket.IO endpoint of the display process."""
        return f"http://{self.host}:{self.port}"


# Module-level singleton: import as `from buildrelay.config import settings`
settings = RelaySettings()
