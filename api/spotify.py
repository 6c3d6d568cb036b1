# api/spotify.py
# Vercel serves the ASGI app exported here at /api/spotify.
from spotify_proxy.main import app  # noqa: F401
