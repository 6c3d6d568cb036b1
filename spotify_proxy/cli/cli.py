r"""
Goal: Friendly, typed CLI for poking a running Spotify Proxy.

- Export `app` (tests import this).
- Show "Spotify Proxy CLI" in --help output (tests assert this).
- Every command is a GET against /api/spotify, the same way a browser widget
  would call it; `serve` hosts the handler locally instead.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

import httpx
import typer

from spotify_proxy.settings import SP_HOST, SP_PORT

app = typer.Typer(
    help="Spotify Proxy CLI",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _base_url() -> str:
    return os.getenv("SP_URL", f"http://{SP_HOST}:{SP_PORT}").rstrip("/")


def _get(path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
    with httpx.Client(timeout=15.0) as c:
        return c.get(f"{_base_url()}{path}", params=params)


def _emit(r: httpx.Response, key: Optional[str] = None) -> None:
    try:
        data: Any = r.json()
    except ValueError:
        data = {"status_code": r.status_code, "text": r.text}
    if key and isinstance(data, dict) and r.is_success:
        data = data.get(key)
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    if not r.is_success:
        raise typer.Exit(1)


@app.callback(help="Spotify Proxy CLI")
def _root_callback() -> None:  # noqa: D401 - short help callback
    """Root callback for the CLI."""
    return None


@app.command("health")
def health() -> None:
    _emit(_get("/health"))


@app.command("overview")
def overview() -> None:
    """Now playing, top tracks and followed artists in one go."""
    _emit(_get("/api/spotify"))


@app.command("now")
def now() -> None:
    _emit(_get("/api/spotify"), key="nowPlaying")


@app.command("pause")
def pause() -> None:
    _emit(_get("/api/spotify", {"action": "pause"}))


@app.command("play")
def play(uri: str = typer.Argument(..., help="e.g. spotify:track:4uLU6hMCjMI75M1A2tKUQC")) -> None:
    _emit(_get("/api/spotify", {"action": "play", "uri": uri}))


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default SP_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port (default SP_PORT)"),
) -> None:
    from spotify_proxy.cli.entry import run

    run(host=host, port=port)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
