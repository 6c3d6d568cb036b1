"""
Spotify Proxy (FastAPI)

Goals
- One endpoint, GET /api/spotify, dispatched on ?action= and ?uri=:
    action=pause          -> pause playback
    action=play&uri=...   -> play that uri
    anything else         -> now playing + top tracks + followed artists
- Stateless: every request authenticates again and opens its own HTTP client.
- Any unexpected failure becomes a 500 with a generic message; never crash.
- /health is a plain liveness probe.

Notes
- Credentials are built once per app (create_app) and reached through
  request.app.state, so tests can hand in their own.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx
from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger

from spotify_proxy.models.schemas import (HealthResponse, PausedResponse,
                                          PlayingResponse, ServerErrorResponse)
from spotify_proxy.services import spotify_service as _spotify_svc
from spotify_proxy.services.logs import configure_logging
from spotify_proxy.settings import (APP_NAME, APP_VERSION, SpotifyCredentials,
                                    load_credentials)

CACHE_CONTROL = "s-maxage=60, stale-while-revalidate=30"
SERVER_ERROR_MESSAGE = "Server par kuch galat hua."
HTTP_TIMEOUT = 10.0


# --------------- Dependencies -------------


def get_credentials(request: Request) -> SpotifyCredentials:
    return request.app.state.credentials


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One outbound client per inbound request; closed when the request ends."""
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        yield client


# --------------- FastAPI ------------------


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("{} {} starting", APP_NAME, APP_VERSION)
    yield
    logger.info("{} shutdown", APP_NAME)


def create_app(credentials: Optional[SpotifyCredentials] = None) -> FastAPI:
    application = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)
    application.state.credentials = credentials or load_credentials()

    @application.get("/health", response_model=HealthResponse)
    async def health() -> dict[str, Any]:
        return {"status": "ok", "name": APP_NAME, "version": APP_VERSION}

    @application.get("/api/spotify")
    async def spotify(
        response: Response,
        action: Optional[str] = None,
        uri: Optional[str] = None,
        credentials: SpotifyCredentials = Depends(get_credentials),
        client: httpx.AsyncClient = Depends(get_http_client),
    ) -> Any:
        try:
            if action == "pause":
                await _spotify_svc.pause(client, credentials)
                return PausedResponse().model_dump()

            if action == "play" and uri:
                await _spotify_svc.play(client, credentials, uri)
                return PlayingResponse(uri=uri).model_dump()

            aggregate = await _spotify_svc.overview(client, credentials)
            response.headers["Cache-Control"] = CACHE_CONTROL
            return aggregate.wire()
        except Exception as e:  # noqa: BLE001
            logger.exception("Root handler error: {}", e)
            body = ServerErrorResponse(error=SERVER_ERROR_MESSAGE, details=str(e))
            return JSONResponse(body.model_dump(), status_code=500)

    return application


configure_logging()
app = create_app()

