"""
Goal: Shared fixtures. A fake Spotify behind httpx.MockTransport so nothing
leaves the machine, plus a TestClient wired to it.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from spotify_proxy.adapters import spotify as sp
from spotify_proxy.main import create_app, get_http_client
from spotify_proxy.settings import SpotifyCredentials

Route = Tuple[str, str]
Reply = Callable[[httpx.Request], httpx.Response]


def track(n: int, artists: List[str] | None = None) -> Dict[str, Any]:
    return {
        "name": f"Track {n}",
        "uri": f"spotify:track:{n:022d}",
        "artists": [{"name": a} for a in (artists or [f"Artist {n}"])],
        "external_urls": {"spotify": f"https://open.spotify.com/track/{n}"},
    }


def artist(n: int) -> Dict[str, Any]:
    return {
        "name": f"Artist {n}",
        "external_urls": {"spotify": f"https://open.spotify.com/artist/{n}"},
        "images": [{"url": f"https://i.scdn.co/image/{n}"}],
    }


class FakeSpotify:
    """Route table keyed by (method, path); every request is recorded."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Route, Reply] = {}
        self.token(200, {"access_token": "tok-123", "token_type": "Bearer",
                         "expires_in": 3600, "scope": "user-top-read"})

    def on(self, method: str, url: str, status: int = 200, body: Any = None) -> None:
        def reply(_: httpx.Request) -> httpx.Response:
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)

        self.routes[(method, httpx.URL(url).path)] = reply

    def token(self, status: int, body: Any) -> None:
        self.on("POST", sp.TOKEN_URL, status, body)

    def raise_on(self, method: str, url: str, exc: Exception) -> None:
        def reply(_: httpx.Request) -> httpx.Response:
            raise exc

        self.routes[(method, httpx.URL(url).path)] = reply

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.routes.get((request.method, request.url.path))
        if reply is None:
            return httpx.Response(404, json={"error": {"status": 404}})
        return reply(request)

    def calls_to(self, url: str) -> List[httpx.Request]:
        path = httpx.URL(url).path
        return [r for r in self.requests if r.url.path == path]

    def json_body(self, request: httpx.Request) -> Any:
        return json.loads(request.content.decode("utf-8"))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def credentials() -> SpotifyCredentials:
    return SpotifyCredentials(
        client_id="cid", client_secret="csecret", refresh_token="rtoken"
    )


@pytest.fixture
def fake() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def client(fake: FakeSpotify, credentials: SpotifyCredentials):
    app = create_app(credentials)

    async def _client():
        async with fake.client() as c:
            yield c

    app.dependency_overrides[get_http_client] = _client
    with TestClient(app) as c:
        yield c
