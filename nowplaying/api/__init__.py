"""Now-playing API layer — routes, schemas, and middleware."""

from nowplaying.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from nowplaying.api.routes import router
from nowplaying.api.schemas import ErrorResponse, HealthResponse, PlayerStateResponse

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ErrorResponse",
    "HealthResponse",
    "PlayerStateResponse",
]
