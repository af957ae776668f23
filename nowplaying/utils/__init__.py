"""Utility modules for the now-playing proxy.

- **errors** -- Domain exception hierarchy rooted at NowPlayingError; each
  class carries the HTTP status the API layer renders it with.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from nowplaying.utils.errors import (
    ConfigurationError,
    InvalidCommandError,
    NowPlayingError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from nowplaying.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "InvalidCommandError",
    "NowPlayingError",
    "UpstreamRejectedError",
    "UpstreamUnavailableError",
    "configure_logging",
    "get_logger",
]
