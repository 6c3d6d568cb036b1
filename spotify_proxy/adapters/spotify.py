"""
Spotify adapter (refresh-token auth + Web API reads/control)

Goals
- Exchange the long-lived refresh token for a bearer token on every call.
  No token cache: each authenticated request re-authenticates.
- Provide the reads the handler aggregates:
    get_now_playing(), get_top_tracks(), get_followed_artists()
- Provide the two playback commands:
    pause_playback(), play_track(uri)
- Never log tokens or the client secret.

Errors
- AuthError propagates; the handler turns it into a 500.
- UpstreamShapeError stays inside the list readers and becomes FetchFailed.
- A failed now-playing call is reported as "not playing", never raised.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Mapping, Optional

import httpx
from loguru import logger

from spotify_proxy.models.results import Fetched, FetchFailed, ListResult
from spotify_proxy.models.schemas import (AccessToken, ErrorShape,
                                          FollowedArtist, NowPlaying, TopTrack)
from spotify_proxy.settings import SpotifyCredentials

API_BASE = "https://api.spotify.com/v1"
TOKEN_URL = "https://accounts.spotify.com/api/token"

NOW_PLAYING_URL = f"{API_BASE}/me/player/currently-playing"
TOP_TRACKS_URL = f"{API_BASE}/me/top/tracks"
FOLLOWED_ARTISTS_URL = f"{API_BASE}/me/following"
PAUSE_URL = f"{API_BASE}/me/player/pause"
PLAY_URL = f"{API_BASE}/me/player/play"

TOP_TRACKS_PARAMS = {"limit": 10, "time_range": "short_term"}
FOLLOWED_ARTISTS_PARAMS = {"type": "artist", "limit": 20}

UNKNOWN_ARTIST = "Unknown Artist"
NOT_PLAYING = "Currently not playing."
DEVICE_INACTIVE = "Currently not playing (device inactive)."


class SpotifyError(Exception):
    """Base for everything this adapter raises."""


class AuthError(SpotifyError):
    """Token exchange failed (bad credentials, revoked token, network)."""


class UpstreamShapeError(SpotifyError):
    """A payload is missing the collection we shape."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


# ---------- auth ----------


def _basic_auth(credentials: SpotifyCredentials) -> str:
    raw = f"{credentials.client_id}:{credentials.client_secret}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def _json_or_empty(r: httpx.Response) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


async def request_access_token(
    client: httpx.AsyncClient, credentials: SpotifyCredentials
) -> AccessToken:
    """
    Refresh-token grant against the accounts service.
    Raises AuthError with Spotify's error text when the exchange is refused.
    """
    try:
        r = await client.post(
            TOKEN_URL,
            headers={
                "Authorization": f"Basic {_basic_auth(credentials)}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            data={
                "grant_type": "refresh_token",
                "refresh_token": credentials.refresh_token,
            },
        )
    except httpx.HTTPError as e:
        raise AuthError(f"Failed to get access token: {e}") from e

    data = _json_or_empty(r)
    if not r.is_success:
        reason = data.get("error") or data.get("error_description") or "Unknown error"
        raise AuthError(f"Failed to get access token: {reason}")
    if not data.get("access_token"):
        raise AuthError("Failed to get access token: response had no access_token")
    return AccessToken.model_validate(data)


async def get_access_token(
    client: httpx.AsyncClient, credentials: SpotifyCredentials
) -> str:
    token = await request_access_token(client, credentials)
    return token.access_token


async def spotify_fetch(
    client: httpx.AsyncClient,
    credentials: SpotifyCredentials,
    url: str,
    method: str = "GET",
    body: Optional[Mapping[str, Any]] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> httpx.Response:
    """
    Issue one Web API call with a freshly minted bearer token.
    The raw response is returned; status handling is up to the caller.
    """
    try:
        token = await get_access_token(client, credentials)
    except AuthError as e:
        logger.error("Spotify token exchange failed: {}", e)
        raise AuthError(f"Spotify Auth Error: {e}") from e

    headers = {"Authorization": f"Bearer {token}"}
    return await client.request(method, url, headers=headers, json=body, params=params)


# ---------- shaping ----------


def _artist_names(artists: Optional[List[Dict[str, Any]]]) -> str:
    names = ", ".join(a.get("name") or "" for a in (artists or []))
    return names or UNKNOWN_ARTIST


def _first_image_url(images: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    if not images:
        return None
    return (images[0] or {}).get("url")


def _spotify_url(obj: Mapping[str, Any]) -> Optional[str]:
    return (obj.get("external_urls") or {}).get("spotify")


def shape_now_playing(payload: Mapping[str, Any]) -> NowPlaying:
    item = payload.get("item")
    if not item:
        return NowPlaying(is_playing=False, message=DEVICE_INACTIVE)
    album = item.get("album") or {}
    return NowPlaying(
        is_playing=bool(payload.get("is_playing")),
        title=item.get("name"),
        artist=_artist_names(item.get("artists")),
        album=album.get("name"),
        album_image_url=_first_image_url(album.get("images")),
        song_url=_spotify_url(item),
    )


def shape_top_tracks(payload: Any) -> List[TopTrack]:
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise UpstreamShapeError("top tracks payload has no items", payload)
    return [
        TopTrack(
            title=t.get("name"),
            artist=_artist_names(t.get("artists")),
            song_url=_spotify_url(t),
            uri=t.get("uri"),
        )
        for t in items
    ]


def shape_followed_artists(payload: Any) -> List[FollowedArtist]:
    artists = payload.get("artists") if isinstance(payload, dict) else None
    items = artists.get("items") if isinstance(artists, dict) else None
    if not isinstance(items, list):
        raise UpstreamShapeError("followed artists payload has no artists.items", payload)
    return [
        FollowedArtist(
            name=a.get("name"),
            artist_url=_spotify_url(a),
            image_url=_first_image_url(a.get("images")),
        )
        for a in items
    ]


# ---------- reads ----------


async def get_now_playing(
    client: httpx.AsyncClient, credentials: SpotifyCredentials
) -> NowPlaying:
    r = await spotify_fetch(client, credentials, NOW_PLAYING_URL)
    if r.status_code == 204:
        return NowPlaying(is_playing=False, message=NOT_PLAYING)
    if r.status_code >= 400:
        # 5xx is reported as not playing too.
        logger.warning("currently-playing returned {}; reporting not playing", r.status_code)
        return NowPlaying(is_playing=False, message=NOT_PLAYING)
    payload = r.json()
    return shape_now_playing(payload if isinstance(payload, dict) else {})


async def get_top_tracks(
    client: httpx.AsyncClient, credentials: SpotifyCredentials
) -> ListResult[TopTrack]:
    r = await spotify_fetch(client, credentials, TOP_TRACKS_URL, params=TOP_TRACKS_PARAMS)
    data = r.json()
    try:
        return Fetched(shape_top_tracks(data))
    except UpstreamShapeError as e:
        logger.error("Error fetching top tracks: {}", e.payload)
        return FetchFailed(ErrorShape(error="Failed to fetch top tracks.", details=data))


async def get_followed_artists(
    client: httpx.AsyncClient, credentials: SpotifyCredentials
) -> ListResult[FollowedArtist]:
    r = await spotify_fetch(
        client, credentials, FOLLOWED_ARTISTS_URL, params=FOLLOWED_ARTISTS_PARAMS
    )
    data = r.json()
    try:
        return Fetched(shape_followed_artists(data))
    except UpstreamShapeError as e:
        logger.error("Error fetching followed artists: {}", e.payload)
        return FetchFailed(
            ErrorShape(error="Failed to fetch followed artists.", details=data)
        )


# ---------- playback ----------


async def pause_playback(
    client: httpx.AsyncClient, credentials: SpotifyCredentials
) -> bool:
    r = await spotify_fetch(client, credentials, PAUSE_URL, method="PUT")
    return r.status_code == 204


async def play_track(
    client: httpx.AsyncClient, credentials: SpotifyCredentials, uri: str
) -> bool:
    r = await spotify_fetch(
        client, credentials, PLAY_URL, method="PUT", body={"uris": [uri]}
    )
    return r.status_code == 204
