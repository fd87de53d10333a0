"""Environment based configuration for the chat relay."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from chatrelay.utils.exceptions import ConfigurationError

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"
WS_PATH = "/ws"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Runtime settings of the relay server and the chat client."""

    host: str = Field(DEFAULT_HOST, description="Bind address")
    port: int = Field(DEFAULT_PORT, description="Listen port")
    log_level: str = Field(DEFAULT_LOG_LEVEL, description="Root log level")
    log_file: Optional[str] = Field(None, description="Optional log file path")
    client_url: str = Field(
        f"ws://localhost:{DEFAULT_PORT}{WS_PATH}", description="Default client URL"
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables."""
        if environ is None:
            environ = os.environ

        raw_port = environ.get("PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError(
                f"PORT must be an integer, got {raw_port!r}", "invalid_port"
            )
        if not 0 < port < 65536:
            raise ConfigurationError(
                f"PORT must be between 1 and 65535, got {port}", "invalid_port"
            )

        log_level = environ.get("CHATRELAY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"CHATRELAY_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, "
                f"got {log_level!r}",
                "invalid_log_level",
            )

        return cls(
            host=environ.get("CHATRELAY_HOST", DEFAULT_HOST),
            port=port,
            log_level=log_level,
            log_file=environ.get("CHATRELAY_LOG_FILE") or None,
            client_url=environ.get(
                "CHATRELAY_URL", f"ws://localhost:{port}{WS_PATH}"
            ),
        )
