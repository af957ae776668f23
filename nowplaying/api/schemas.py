"""Pydantic response schemas for the now-playing API.

The track payloads themselves (``CurrentTrack``, ``TopTracks``) are the
domain models from ``nowplaying.models.track``; they are frozen and safe to
serialize straight out of the cache.  This module only holds the envelopes
that exist purely for the HTTP layer.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PlayerStateResponse(BaseModel):
    """Acknowledgement returned after a playback command succeeded."""

    player_state: str = Field(description="The command that was executed")
    status: str = "ok"


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    provider: str
    cached_keys: list[str] = Field(default_factory=list)
    in_flight_keys: list[str] = Field(default_factory=list)
    cache_ttl_seconds: float


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
