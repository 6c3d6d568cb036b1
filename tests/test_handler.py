"""
Goal: End-to-end through FastAPI: dispatch on ?action=, the aggregate view,
cache header and the 500 guard.
"""
import httpx

from conftest import artist, track
from spotify_proxy.adapters import spotify as sp


def _all_reads_ok(fake):
    item = track(99, ["A", "B"])
    item["album"] = {"name": "LP", "images": [{"url": "https://img/lp"}]}
    fake.on("GET", sp.NOW_PLAYING_URL, 200, {"is_playing": True, "item": item})
    fake.on("GET", sp.TOP_TRACKS_URL, 200, {"items": [track(i) for i in range(10)]})
    fake.on(
        "GET",
        sp.FOLLOWED_ARTISTS_URL,
        200,
        {"artists": {"items": [artist(i) for i in range(20)]}},
    )


def test_health_open(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"


def test_aggregate_view(client, fake):
    _all_reads_ok(fake)
    r = client.get("/api/spotify")

    assert r.status_code == 200
    assert r.headers["cache-control"] == "s-maxage=60, stale-while-revalidate=30"
    data = r.json()
    assert data["nowPlaying"]["isPlaying"] is True
    assert data["nowPlaying"]["artist"] == "A, B"
    assert len(data["topTracks"]) == 10
    assert data["topTracks"][0]["title"] == "Track 0"
    assert len(data["followedArtists"]) == 20
    assert data["followedArtists"][19]["name"] == "Artist 19"
    # one token exchange per outbound read
    assert len(fake.calls_to(sp.TOKEN_URL)) == 3


def test_aggregate_embeds_error_shape(client, fake):
    _all_reads_ok(fake)
    fake.on("GET", sp.TOP_TRACKS_URL, 429, {"error": {"status": 429}})
    r = client.get("/api/spotify")

    assert r.status_code == 200
    data = r.json()
    assert data["topTracks"] == {
        "error": "Failed to fetch top tracks.",
        "details": {"error": {"status": 429}},
    }
    assert len(data["followedArtists"]) == 20


def test_nothing_playing_in_aggregate(client, fake):
    _all_reads_ok(fake)
    fake.on("GET", sp.NOW_PLAYING_URL, 204)
    data = client.get("/api/spotify").json()
    assert data["nowPlaying"] == {"isPlaying": False, "message": "Currently not playing."}


def test_pause(client, fake):
    fake.on("PUT", sp.PAUSE_URL, 204)
    r = client.get("/api/spotify", params={"action": "pause"})
    assert r.status_code == 200
    assert r.json() == {"status": "paused"}
    assert len(fake.calls_to(sp.PAUSE_URL)) == 1
    assert "cache-control" not in r.headers


def test_play(client, fake):
    fake.on("PUT", sp.PLAY_URL, 204)
    r = client.get("/api/spotify", params={"action": "play", "uri": "spotify:track:XYZ"})
    assert r.status_code == 200
    assert r.json() == {"status": "playing", "uri": "spotify:track:XYZ"}
    (req,) = fake.calls_to(sp.PLAY_URL)
    assert fake.json_body(req) == {"uris": ["spotify:track:XYZ"]}


def test_play_unconfirmed_still_reports_playing(client, fake):
    fake.on("PUT", sp.PLAY_URL, 404, {"error": {"reason": "NO_ACTIVE_DEVICE"}})
    r = client.get("/api/spotify", params={"action": "play", "uri": "spotify:track:XYZ"})
    assert r.status_code == 200
    assert r.json()["status"] == "playing"


def test_play_without_uri_falls_through(client, fake):
    _all_reads_ok(fake)
    r = client.get("/api/spotify", params={"action": "play"})
    assert r.status_code == 200
    assert set(r.json()) == {"nowPlaying", "topTracks", "followedArtists"}
    assert fake.calls_to(sp.PLAY_URL) == []


def test_auth_failure_is_500(client, fake):
    fake.token(400, {"error": "invalid_grant"})
    r = client.get("/api/spotify")
    assert r.status_code == 500
    data = r.json()
    assert data["error"] == "Server par kuch galat hua."
    assert "invalid_grant" in data["details"]


def test_network_failure_is_500(client, fake):
    _all_reads_ok(fake)
    fake.raise_on("PUT", sp.PAUSE_URL, httpx.ReadTimeout("slow"))
    r = client.get("/api/spotify", params={"action": "pause"})
    assert r.status_code == 500
    assert "error" in r.json()


def test_aggregate_keeps_null_track_fields(client, fake):
    _all_reads_ok(fake)
    bare = {"name": "Local file", "uri": None, "artists": [{"name": "A"}]}
    fake.on("GET", sp.TOP_TRACKS_URL, 200, {"items": [bare]})
    data = client.get("/api/spotify").json()
    assert data["topTracks"] == [
        {"title": "Local file", "artist": "A", "songUrl": None, "uri": None}
    ]
