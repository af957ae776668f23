"""Unit tests for domain models — tracks, playback commands, cache entries."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest
from pydantic import ValidationError

from nowplaying.models.cache import CacheEntry, CacheKey
from nowplaying.models.playback import PlaybackCommand
from nowplaying.models.track import CurrentTrack, NothingPlaying, TopTracks, Track
from nowplaying.utils.errors import InvalidCommandError, NowPlayingError


class TestTrackModels:
    def test_track_defaults(self) -> None:
        track = Track(name="Jaguar")
        assert track.artists == []
        assert track.id is None
        assert track.image_url is None

    def test_track_is_frozen(self) -> None:
        track = Track(name="Jaguar")
        with pytest.raises(ValidationError):
            track.name = "Changed"  # type: ignore[misc]

    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Track(name="Jaguar", duration_ms=-1)

    def test_current_track_serialises_status(self) -> None:
        current = CurrentTrack(track=Track(name="Jaguar", artists=["DJ Rolando"]), progress_ms=0)
        data = current.model_dump()
        assert data["status"] == "playing"
        assert data["track"]["artists"] == ["DJ Rolando"]

    def test_nothing_playing_status(self) -> None:
        assert NothingPlaying().status == "nothing_playing"

    def test_top_tracks_default_range(self) -> None:
        assert TopTracks().time_range == "short_term"


class TestPlaybackCommand:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("play", PlaybackCommand.PLAY),
            ("PAUSE", PlaybackCommand.PAUSE),
            (" Next ", PlaybackCommand.NEXT),
            ("previous", PlaybackCommand.PREVIOUS),
        ],
    )
    def test_parse_known(self, raw: str, expected: PlaybackCommand) -> None:
        assert PlaybackCommand.parse(raw) is expected

    def test_parse_passes_member_through(self) -> None:
        assert PlaybackCommand.parse(PlaybackCommand.PLAY) is PlaybackCommand.PLAY

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(InvalidCommandError) as exc_info:
            PlaybackCommand.parse("shuffle")
        assert "shuffle" in exc_info.value.message
        assert exc_info.value.status_code == 400
        assert isinstance(exc_info.value, NowPlayingError)


class TestCacheEntry:
    def test_entry_is_frozen(self) -> None:
        entry = CacheEntry(value=1, expires_at=10.0)
        with pytest.raises(FrozenInstanceError):
            entry.expires_at = 20.0  # type: ignore[misc]

    def test_cache_key_values(self) -> None:
        assert {k.value for k in CacheKey} == {"current-track", "top-tracks"}
