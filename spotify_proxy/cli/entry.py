"""
Spotify Proxy entrypoint

Goals
- Simple uvicorn runner so `python -m spotify_proxy.cli.entry` or the
  `spotify-proxy-serve` script can host the handler locally.
- Keep config via env (SP_HOST/SP_PORT) and let Loguru own the logs.
"""

from __future__ import annotations

from typing import Optional

import uvicorn
from loguru import logger

from spotify_proxy.settings import SP_HOST, SP_PORT


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    host = host or SP_HOST
    port = port or SP_PORT
    logger.info("Starting Uvicorn on {}:{}", host, port)
    uvicorn.run(
        "spotify_proxy.main:app",
        host=host,
        port=port,
        reload=False,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    run()
