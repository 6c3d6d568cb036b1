"""
Goal: Pydantic models for the shapes the proxy returns.
Attributes are snake_case; the JSON keys are camelCase via the alias generator.
"""
from typing import Any, ClassVar, List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # False keeps None fields as JSON null
    omit_none: ClassVar[bool] = True

    def wire(self) -> dict:
        """JSON-ready dict: camelCase keys, None optionals left out unless omit_none is off."""
        return self.model_dump(by_alias=True, exclude_none=self.omit_none)


class AccessToken(BaseModel):
    access_token: str
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None


class NowPlaying(_Wire):
    is_playing: bool = False
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    album_image_url: Optional[str] = None
    song_url: Optional[str] = None
    message: Optional[str] = None


class TopTrack(_Wire):
    omit_none: ClassVar[bool] = False

    title: Optional[str] = None
    artist: str
    song_url: Optional[str] = None
    uri: Optional[str] = None


class FollowedArtist(_Wire):
    name: Optional[str] = None
    artist_url: Optional[str] = None
    image_url: Optional[str] = None


class ErrorShape(_Wire):
    error: str
    details: Optional[Any] = None


def _section(value: Union[List[_Wire], ErrorShape]) -> Union[list, dict]:
    if isinstance(value, ErrorShape):
        return value.wire()
    return [v.wire() for v in value]


class AggregateResponse(_Wire):
    now_playing: NowPlaying
    top_tracks: Union[List[TopTrack], ErrorShape]
    followed_artists: Union[List[FollowedArtist], ErrorShape]

    def wire(self) -> dict:
        return {
            "nowPlaying": self.now_playing.wire(),
            "topTracks": _section(self.top_tracks),
            "followedArtists": _section(self.followed_artists),
        }


class PausedResponse(BaseModel):
    status: str = "paused"


class PlayingResponse(BaseModel):
    status: str = "playing"
    uri: str


class ServerErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    name: str
    version: str
