"""Shared pytest fixtures for the now-playing proxy test suite."""

from __future__ import annotations

import asyncio

import pytest

from nowplaying.config.settings import Settings
from nowplaying.interfaces.streaming_provider import IStreamingProvider
from nowplaying.models.playback import PlaybackCommand
from nowplaying.models.track import (
    CurrentTrack,
    CurrentTrackResult,
    NothingPlaying,
    TopTracks,
    Track,
)
from nowplaying.providers.cache.memory_cache import MemoryCacheProvider
from nowplaying.services.cache_coordinator import CacheCoordinator
from nowplaying.services.playback_dispatcher import PlaybackDispatcher

# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class ManualClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStreamingProvider(IStreamingProvider):
    """In-memory IStreamingProvider that records every upstream call.

    Results and exceptions are set per operation.  When a ``gate`` event is
    supplied, every read blocks on it so a test can hold fetches in flight.
    ``peak_current_active`` records the most current-track reads that were
    ever outstanding at once.
    """

    def __init__(
        self,
        current: CurrentTrackResult | None = None,
        top: TopTracks | None = None,
    ) -> None:
        self.current: CurrentTrackResult = current or NothingPlaying()
        self.top: TopTracks = top or TopTracks(tracks=[])
        self.current_error: Exception | None = None
        self.top_error: Exception | None = None
        self.command_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.current_calls = 0
        self.current_active = 0
        self.peak_current_active = 0
        self.top_calls = 0
        self.commands: list[PlaybackCommand] = []

    async def _wait_for_gate(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def get_current_track(self) -> CurrentTrackResult:
        self.current_calls += 1
        self.current_active += 1
        self.peak_current_active = max(self.peak_current_active, self.current_active)
        try:
            await self._wait_for_gate()
            if self.current_error is not None:
                raise self.current_error
            return self.current
        finally:
            self.current_active -= 1

    async def get_top_tracks(self) -> TopTracks:
        self.top_calls += 1
        await self._wait_for_gate()
        if self.top_error is not None:
            raise self.top_error
        return self.top

    async def send_command(self, command: PlaybackCommand) -> None:
        if self.command_error is not None:
            raise self.command_error
        self.commands.append(command)

    def get_provider_name(self) -> str:
        return "fake"


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def make_track(name: str = "Strings of Life", artist: str = "Rhythim Is Rhythim") -> Track:
    return Track(
        id=name.lower().replace(" ", "-"),
        name=name,
        artists=[artist],
        album="Innovator",
        url=f"https://open.spotify.com/track/{name.lower().replace(' ', '')}",
        image_url="https://i.scdn.co/image/large",
        duration_ms=372000,
    )


@pytest.fixture
def sample_current_track() -> CurrentTrack:
    return CurrentTrack(track=make_track(), is_playing=True, progress_ms=61000)


@pytest.fixture
def sample_top_tracks() -> TopTracks:
    return TopTracks(
        time_range="short_term",
        tracks=[
            make_track("Strings of Life", "Rhythim Is Rhythim"),
            make_track("Spastik", "Plastikman"),
            make_track("The Bells", "Jeff Mills"),
        ],
    )


@pytest.fixture
def spotify_settings() -> Settings:
    """Settings with dummy credentials and no dependence on the real environment."""
    return Settings(
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        spotify_refresh_token="refresh-token",
        app_env="test",
    )


# ---------------------------------------------------------------------------
# Wired components
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def fake_provider(sample_current_track: CurrentTrack, sample_top_tracks: TopTracks) -> FakeStreamingProvider:
    return FakeStreamingProvider(current=sample_current_track, top=sample_top_tracks)


@pytest.fixture
def cache_store(clock: ManualClock) -> MemoryCacheProvider:
    return MemoryCacheProvider(clock=clock)


@pytest.fixture
def coordinator(cache_store: MemoryCacheProvider) -> CacheCoordinator:
    return CacheCoordinator(store=cache_store, ttl=10.0)


@pytest.fixture
def dispatcher(fake_provider: FakeStreamingProvider, coordinator: CacheCoordinator) -> PlaybackDispatcher:
    return PlaybackDispatcher(provider=fake_provider, coordinator=coordinator)
