"""Now-playing domain models — re-exports all public model classes.

    - cache.py     — CacheKey enum and the CacheEntry value/expiry pair
    - playback.py  — PlaybackCommand enum with path-segment parsing
    - track.py     — Track, CurrentTrack, NothingPlaying, TopTracks
"""

from __future__ import annotations

from nowplaying.models.cache import CacheEntry, CacheKey
from nowplaying.models.playback import PlaybackCommand
from nowplaying.models.track import (
    CurrentTrack,
    CurrentTrackResult,
    NothingPlaying,
    TopTracks,
    Track,
)

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CurrentTrack",
    "CurrentTrackResult",
    "NothingPlaying",
    "PlaybackCommand",
    "TopTracks",
    "Track",
]
