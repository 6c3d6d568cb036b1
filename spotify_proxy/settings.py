"""
Goal: Centralized configuration for the proxy (credentials, ports, logging).
Everything comes from the environment; a local .env is picked up for dev runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Local dev convenience; on the serverless host the env is already populated
load_dotenv()


def _validate_port(port_str: str, default: int) -> int:
    """Validate port number is in valid range."""
    try:
        port = int(port_str)
        if 1024 <= port <= 65535:
            return port
    except ValueError:
        pass
    return default


def _optional_path(value: Optional[str]) -> Optional[Path]:
    value = (value or "").strip()
    return Path(value) if value else None


@dataclass(frozen=True)
class SpotifyCredentials:
    """The three secrets needed for the refresh-token grant."""

    client_id: str
    client_secret: str
    refresh_token: str


def load_credentials() -> SpotifyCredentials:
    """
    Read the Spotify secrets from the environment.
    Missing values stay empty; Spotify will reject them at token exchange.
    """
    return SpotifyCredentials(
        client_id=os.getenv("SPOTIFY_CLIENT_ID", ""),
        client_secret=os.getenv("SPOTIFY_CLIENT_SECRET", ""),
        refresh_token=os.getenv("SPOTIFY_REFRESH_TOKEN", ""),
    )


APP_NAME = "Spotify Proxy"
APP_VERSION = "1.0.0"

# Local runner (uvicorn) and CLI defaults
SP_HOST = os.getenv("SP_HOST", "127.0.0.1")
SP_PORT = _validate_port(os.getenv("SP_PORT", "5025"), 5025)

# File logging is opt-in; serverless filesystems are read-only
LOG_DIR = _optional_path(os.getenv("SP_LOG_DIR"))
LOG_LEVEL = os.getenv("SP_LOG_LEVEL", "INFO").upper()
