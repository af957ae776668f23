"""Custom exception hierarchy for the now-playing proxy.

All application exceptions inherit from :class:`NowPlayingError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "spotify", "spotify-accounts") caused the failure,
and an HTTP ``status_code`` the API layer uses when rendering the error.

    NowPlayingError  (base -- catch-all for any proxy error)
    +-- UpstreamUnavailableError  (network failure / 5xx / 429 from Spotify)   -> 502
    +-- UpstreamRejectedError     (4xx from Spotify, e.g. no active device)   -> 400
    +-- InvalidCommandError       (unknown player_state in the request path)  -> 400
    +-- ConfigurationError        (startup / missing credentials)             -> 500

"Nothing playing" is deliberately NOT an error: the upstream call succeeded
and simply reported no active session.  See ``NothingPlaying`` in
``nowplaying.models.track``.
"""


class NowPlayingError(Exception):
    """Base exception for all now-playing proxy errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[spotify] Player command failed``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Upstream (streaming API) errors
# ---------------------------------------------------------------------------

class UpstreamUnavailableError(NowPlayingError):
    """Raised when the streaming API is unreachable or answers with a 5xx.

    Rate limiting (429) is reported through this class as well: the proxy
    performs no retries of its own, so the caller sees a gateway failure.
    """

    status_code = 502

    def __init__(
        self,
        message: str = "Streaming service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpstreamRejectedError(NowPlayingError):
    """Raised when the streaming API rejects a request with a 4xx status.

    Typical causes are "no active playback device", an expired or revoked
    refresh token, or a premium-only player endpoint.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Streaming service rejected the request",
        provider_name: str | None = None,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._upstream_status = upstream_status

    @property
    def upstream_status(self) -> int | None:
        return self._upstream_status


# ---------------------------------------------------------------------------
# Request validation errors
# ---------------------------------------------------------------------------

class InvalidCommandError(NowPlayingError):
    """Raised when a player_state value is not a known playback command."""

    status_code = 400

    def __init__(
        self,
        message: str = "Unknown playback command",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(NowPlayingError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
