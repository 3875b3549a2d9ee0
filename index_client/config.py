"""Connection settings for the index daemon."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 1234
CONNECT_TIMEOUT = 2.0
READ_TIMEOUT = 30.0


def _env_number(name: str, default, cast=float):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


@dataclass
class ClientConfig:
    """Where the daemon lives and how long to wait for it."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    connect_timeout: float = CONNECT_TIMEOUT
    read_timeout: float = READ_TIMEOUT

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load settings from INDEX_CLIENT_* environment variables."""
        return cls(
            host=os.environ.get("INDEX_CLIENT_HOST") or DEFAULT_HOST,
            port=_env_number("INDEX_CLIENT_PORT", DEFAULT_PORT, int),
            username=os.environ.get("INDEX_CLIENT_USER"),
            password=os.environ.get("INDEX_CLIENT_PASSWORD"),
            connect_timeout=_env_number("INDEX_CLIENT_CONNECT_TIMEOUT", CONNECT_TIMEOUT),
            read_timeout=_env_number("INDEX_CLIENT_READ_TIMEOUT", READ_TIMEOUT),
        )
