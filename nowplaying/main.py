"""Now-playing proxy FastAPI application entry point.

Wires together the cache, the Spotify provider, the coordinator, the
playback dispatcher and the routes via dependency injection.  Loads
configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from nowplaying import __version__
from nowplaying.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from nowplaying.api.routes import router as api_router
from nowplaying.config.loader import load_config
from nowplaying.config.settings import Settings
from nowplaying.providers.cache.memory_cache import MemoryCacheProvider
from nowplaying.providers.streaming.spotify_provider import SpotifyProvider
from nowplaying.services.cache_coordinator import CacheCoordinator
from nowplaying.services.playback_dispatcher import PlaybackDispatcher
from nowplaying.utils.errors import ConfigurationError
from nowplaying.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.

    Raises
    ------
    ConfigurationError
        If any of the three Spotify credentials is missing.  The proxy
        cannot serve a single request without them.
    """
    missing = app_settings.missing_spotify_credentials()
    if missing:
        raise ConfigurationError(
            message=f"Missing required environment variables: {', '.join(missing)}",
            provider_name="config",
        )

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.upstream_timeout_seconds)

    # -- Cache --
    cache_store = MemoryCacheProvider()
    cache_coordinator = CacheCoordinator(
        store=cache_store,
        ttl=app_settings.cache_ttl_seconds,
    )

    # -- Upstream --
    refresh_margin = config.get("spotify", {}).get("token_refresh_margin_seconds", 30.0)
    streaming_provider = SpotifyProvider(
        settings=app_settings,
        http_client=http_client,
        token_refresh_margin=float(refresh_margin),
    )

    # -- Services --
    playback_dispatcher = PlaybackDispatcher(
        provider=streaming_provider,
        coordinator=cache_coordinator,
    )

    return {
        "http_client": http_client,
        "cache_store": cache_store,
        "cache_coordinator": cache_coordinator,
        "streaming_provider": streaming_provider,
        "playback_dispatcher": playback_dispatcher,
        "settings": app_settings,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        provider=components["streaming_provider"].get_provider_name(),
        cache_ttl_seconds=components["cache_coordinator"].ttl,
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Now Playing Proxy",
        version=__version__,
        description=(
            "Serve the currently playing Spotify track and short-term top tracks "
            "from a 10 second cache, and forward play/pause/next/previous "
            "commands to the active device."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def run() -> None:
    """Serve the application with uvicorn (``now-playing-proxy`` console script)."""
    uvicorn.run(
        "nowplaying.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )


if __name__ == "__main__":
    run()
