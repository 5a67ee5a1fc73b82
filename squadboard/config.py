"""Runtime settings for Squadboard, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_DB_PATH = "squadboard.db"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """
    Deployment settings.

    Attributes:
        db_path: SQLite file backing the team data store
        host: Address the web API binds to
        port: Port the web API listens on
        log_level: Level name passed to :func:`configure_logging`
    """
    db_path: str = DEFAULT_DB_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        port_text = env.get("SQUADBOARD_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_text)
        except ValueError:
            raise ValueError(f"SQUADBOARD_PORT must be an integer, got {port_text!r}") from None
        return cls(
            db_path=env.get("SQUADBOARD_DB_PATH", DEFAULT_DB_PATH),
            host=env.get("SQUADBOARD_HOST", DEFAULT_HOST),
            port=port,
            log_level=env.get("SQUADBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
