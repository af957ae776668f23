"""FastAPI routes for the now-playing proxy.

Read routes go through the cache coordinator; the player route goes through
the playback dispatcher.  Service dependencies are resolved from
``app.state`` via FastAPI's ``Depends`` using the ``Annotated`` pattern.

# ─── API ROUTE MAP ─────────────────────────────────────────────────────
#
# Endpoint                   Method     Description
# ─────────────────────────────────────────────────────────────────────
# /                          GET        Current track (204 when idle)
# /top-songs                 GET        Short-term top tracks
# /player/{player_state}     POST, PUT  play | pause | next | previous
# /health                    GET        Health check + cache state
#
# Errors are raised as NowPlayingError subclasses and rendered by
# ErrorHandlingMiddleware (502 upstream down, 400 rejected / bad command).
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response

from nowplaying import __version__
from nowplaying.api.schemas import ErrorResponse, HealthResponse, PlayerStateResponse
from nowplaying.interfaces.streaming_provider import IStreamingProvider
from nowplaying.models.cache import CacheKey
from nowplaying.models.track import CurrentTrack, NothingPlaying, TopTracks
from nowplaying.services.cache_coordinator import CacheCoordinator
from nowplaying.services.playback_dispatcher import PlaybackDispatcher
from nowplaying.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()

_UPSTREAM_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Spotify rejected the request"},
    502: {"model": ErrorResponse, "description": "Spotify is unreachable"},
}


# ---------------------------------------------------------------------------
# Dependency injection helpers: resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_coordinator(request: Request) -> CacheCoordinator:
    """Return the cache coordinator from application state."""
    return request.app.state.cache_coordinator


def _get_dispatcher(request: Request) -> PlaybackDispatcher:
    """Return the playback dispatcher from application state."""
    return request.app.state.playback_dispatcher


def _get_provider(request: Request) -> IStreamingProvider:
    """Return the streaming provider from application state."""
    return request.app.state.streaming_provider


CoordinatorDep = Annotated[CacheCoordinator, Depends(_get_coordinator)]
DispatcherDep = Annotated[PlaybackDispatcher, Depends(_get_dispatcher)]
ProviderDep = Annotated[IStreamingProvider, Depends(_get_provider)]


# ---------------------------------------------------------------------------
# Read routes
# ---------------------------------------------------------------------------


@router.get(
    "/",
    response_model=CurrentTrack,
    summary="Currently playing track",
    responses={204: {"description": "Nothing is playing"}, **_UPSTREAM_ERROR_RESPONSES},
)
async def get_current_song(
    coordinator: CoordinatorDep,
    provider: ProviderDep,
) -> CurrentTrack | Response:
    """Return the track the user is listening to, served from a 10 s cache."""
    _logger.info("current_track_requested")
    result = await coordinator.get_or_fetch(CacheKey.CURRENT_TRACK, provider.get_current_track)
    if isinstance(result, NothingPlaying):
        return Response(status_code=204)
    return result


@router.get(
    "/top-songs",
    response_model=TopTracks,
    summary="Short-term top tracks",
    responses=_UPSTREAM_ERROR_RESPONSES,
)
async def get_top_songs(
    coordinator: CoordinatorDep,
    provider: ProviderDep,
) -> TopTracks:
    """Return the user's top tracks, served from a 10 s cache."""
    _logger.info("top_tracks_requested")
    return await coordinator.get_or_fetch(CacheKey.TOP_TRACKS, provider.get_top_tracks)


# ---------------------------------------------------------------------------
# Player route
# ---------------------------------------------------------------------------


@router.api_route(
    "/player/{player_state}",
    methods=["POST", "PUT"],
    response_model=PlayerStateResponse,
    summary="Send a playback command",
    responses=_UPSTREAM_ERROR_RESPONSES,
)
async def update_player_state(
    player_state: str,
    dispatcher: DispatcherDep,
) -> PlayerStateResponse:
    """Play, pause, skip forward or skip back on the active device."""
    _logger.info("player_state_requested", player_state=player_state)
    command = await dispatcher.execute(player_state)
    return PlayerStateResponse(player_state=command.value)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(
    coordinator: CoordinatorDep,
    provider: ProviderDep,
) -> HealthResponse:
    """Return version, upstream provider and what the cache currently holds."""
    cached = await coordinator.store.keys()
    return HealthResponse(
        status="healthy",
        version=__version__,
        provider=provider.get_provider_name(),
        cached_keys=sorted(k.value for k in cached),
        in_flight_keys=sorted(k.value for k in coordinator.in_flight_keys()),
        cache_ttl_seconds=coordinator.ttl,
    )
