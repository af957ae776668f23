"""Track domain models returned by the streaming provider.

All models use frozen config so a value handed out by the cache can be
shared between concurrent requests without any caller mutating it.

The current-track lookup has two *success* shapes:

    CurrentTrack    — a session is active and a track item is present
    NothingPlaying  — the upstream answered fine but nothing is playing

Failures are exceptions (see ``nowplaying.utils.errors``), never models.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Track(BaseModel):
    """A single track as exposed by the proxy."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    artists: list[str] = Field(default_factory=list)
    album: str | None = None
    url: str | None = Field(default=None, description="Public web link to the track")
    image_url: str | None = Field(default=None, description="Largest available album art")
    duration_ms: int | None = Field(default=None, ge=0)


class CurrentTrack(BaseModel):
    """The track the user is listening to right now."""

    model_config = ConfigDict(frozen=True)

    status: Literal["playing"] = "playing"
    track: Track
    is_playing: bool = True
    progress_ms: int | None = Field(default=None, ge=0)


class NothingPlaying(BaseModel):
    """Successful lookup that found no active playback session."""

    model_config = ConfigDict(frozen=True)

    status: Literal["nothing_playing"] = "nothing_playing"


CurrentTrackResult = Union[CurrentTrack, NothingPlaying]


class TopTracks(BaseModel):
    """The user's top tracks for a time range, most-played first."""

    model_config = ConfigDict(frozen=True)

    time_range: str = "short_term"
    tracks: list[Track] = Field(default_factory=list)
