"""
Goal: Stable surface for the HTTP handler, regardless of adapter details.
The overview fans out the three reads and always returns all three sections;
if one read raises, the others are cancelled before the error propagates.
"""

from __future__ import annotations

import asyncio

import httpx
from loguru import logger

from spotify_proxy.adapters import spotify as _sp
from spotify_proxy.models.results import to_wire
from spotify_proxy.models.schemas import AggregateResponse
from spotify_proxy.settings import SpotifyCredentials


async def overview(
    client: httpx.AsyncClient, credentials: SpotifyCredentials
) -> AggregateResponse:
    reads = [
        asyncio.ensure_future(_sp.get_now_playing(client, credentials)),
        asyncio.ensure_future(_sp.get_top_tracks(client, credentials)),
        asyncio.ensure_future(_sp.get_followed_artists(client, credentials)),
    ]
    try:
        now_playing, top_tracks, followed_artists = await asyncio.gather(*reads)
    except BaseException:
        # the client closes with the request; nothing may outlive it
        for task in reads:
            task.cancel()
        await asyncio.gather(*reads, return_exceptions=True)
        raise
    return AggregateResponse(
        now_playing=now_playing,
        top_tracks=to_wire(top_tracks),
        followed_artists=to_wire(followed_artists),
    )


async def pause(client: httpx.AsyncClient, credentials: SpotifyCredentials) -> bool:
    ok = await _sp.pause_playback(client, credentials)
    if not ok:
        logger.warning("Spotify did not confirm pause (expected 204)")
    return ok


async def play(
    client: httpx.AsyncClient, credentials: SpotifyCredentials, uri: str
) -> bool:
    ok = await _sp.play_track(client, credentials, uri)
    if not ok:
        logger.warning("Spotify did not confirm play for {} (expected 204)", uri)
    return ok
