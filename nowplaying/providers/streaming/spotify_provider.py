"""Spotify Web API provider implementing IStreamingProvider.

Authenticates with a long-lived refresh token (authorization-code flow done
once, out of band) and exchanges it for short-lived access tokens on
demand.  The ``httpx.AsyncClient`` is injected for testability and shared
with the rest of the application.

Status mapping for every upstream call:

    2xx / 204         -> success
    429, 5xx, network -> UpstreamUnavailableError
    other 4xx         -> UpstreamRejectedError
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any

import httpx

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
from nowplaying.utils.errors import UpstreamRejectedError, UpstreamUnavailableError
from nowplaying.utils.logging import get_logger

_PROVIDER_NAME = "spotify"
_ACCOUNTS_PROVIDER_NAME = "spotify-accounts"
_DEFAULT_TOKEN_LIFETIME = 3600
_TOKEN_REFRESH_MARGIN = 30.0  # seconds

_COMMAND_ROUTES: dict[PlaybackCommand, tuple[str, str]] = {
    PlaybackCommand.PLAY: ("PUT", "/me/player/play"),
    PlaybackCommand.PAUSE: ("PUT", "/me/player/pause"),
    PlaybackCommand.NEXT: ("POST", "/me/player/next"),
    PlaybackCommand.PREVIOUS: ("POST", "/me/player/previous"),
}


class SpotifyProvider(IStreamingProvider):
    """Streaming provider backed by the Spotify Web API.

    Access tokens are cached until shortly before Spotify says they expire.
    Concurrent callers that find the token stale share one refresh through
    an ``asyncio.Lock``.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        clock: Callable[[], float] = time.monotonic,
        token_refresh_margin: float = _TOKEN_REFRESH_MARGIN,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._clock = clock
        self._refresh_margin = token_refresh_margin
        self._api_base = settings.spotify_api_base_url.rstrip("/")
        self._refresh_token = settings.spotify_refresh_token
        self._access_token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    # -- Token handling --------------------------------------------------------

    def _token_is_fresh(self) -> bool:
        return (
            self._access_token is not None
            and self._clock() < self._token_expires_at - self._refresh_margin
        )

    async def _get_access_token(self) -> str:
        if self._token_is_fresh():
            return self._access_token  # type: ignore[return-value]
        async with self._token_lock:
            # Another caller may have refreshed while we waited for the lock.
            if not self._token_is_fresh():
                await self._refresh_access_token()
        return self._access_token  # type: ignore[return-value]

    async def _refresh_access_token(self) -> None:
        """Exchange the refresh token for a new access token."""
        try:
            response = await self._http.post(
                self._settings.spotify_accounts_url,
                auth=(self._settings.spotify_client_id, self._settings.spotify_client_secret),
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": self._refresh_token,
                },
            )
        except httpx.HTTPError as exc:
            self._logger.error("spotify_token_request_failed", error=str(exc))
            raise UpstreamUnavailableError(
                message=f"Could not reach the Spotify accounts service: {exc}",
                provider_name=_ACCOUNTS_PROVIDER_NAME,
            ) from exc

        self._raise_for_status(response, provider_name=_ACCOUNTS_PROVIDER_NAME)

        try:
            payload = response.json()
            access_token = payload["access_token"]
        except (ValueError, KeyError) as exc:
            raise UpstreamUnavailableError(
                message="Spotify accounts service returned an unreadable token response",
                provider_name=_ACCOUNTS_PROVIDER_NAME,
            ) from exc

        expires_in = int(payload.get("expires_in") or _DEFAULT_TOKEN_LIFETIME)
        self._access_token = access_token
        self._token_expires_at = self._clock() + expires_in
        # Spotify may rotate the refresh token; keep the newest one.
        if payload.get("refresh_token"):
            self._refresh_token = payload["refresh_token"]
        self._logger.info("spotify_token_refreshed", expires_in=expires_in)

    # -- Request helpers -------------------------------------------------------

    def _raise_for_status(self, response: httpx.Response, provider_name: str = _PROVIDER_NAME) -> None:
        status = response.status_code
        if status < 400:
            return

        reason = self._error_reason(response)
        try:
            url: str | None = str(response.request.url)
        except RuntimeError:
            url = None
        self._logger.warning(
            "spotify_http_error",
            provider=provider_name,
            status=status,
            url=url,
            reason=reason,
        )
        if status == 429 or status >= 500:
            raise UpstreamUnavailableError(
                message=f"Spotify responded {status}: {reason}",
                provider_name=provider_name,
            )
        if status == 401:
            # Force a token refresh on the next call.
            self._access_token = None
        raise UpstreamRejectedError(
            message=f"Spotify rejected the request ({status}): {reason}",
            provider_name=provider_name,
            upstream_status=status,
        )

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase or "unknown error"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return str(error.get("reason") or error.get("message") or "unknown error")
        if isinstance(error, str):
            return str(body.get("error_description") or error)
        return response.reason_phrase or "unknown error"

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        token = await self._get_access_token()
        url = f"{self._api_base}{path}"
        try:
            response = await self._http.request(
                method,
                url,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            self._logger.error("spotify_request_failed", method=method, url=url, error=str(exc))
            raise UpstreamUnavailableError(
                message=f"Could not reach Spotify: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        self._raise_for_status(response)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError(
                message="Spotify returned a body that is not JSON",
                provider_name=_PROVIDER_NAME,
            ) from exc
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _track_from_item(item: dict[str, Any]) -> Track:
        """Build a ``Track`` from a Spotify track object."""
        images = (item.get("album") or {}).get("images") or []
        largest = max(images, key=lambda img: img.get("width") or 0, default=None)
        return Track(
            id=item.get("id"),
            name=item.get("name") or "Unknown",
            artists=[a.get("name", "") for a in item.get("artists") or [] if a.get("name")],
            album=(item.get("album") or {}).get("name"),
            url=(item.get("external_urls") or {}).get("spotify"),
            image_url=largest.get("url") if largest else None,
            duration_ms=item.get("duration_ms"),
        )

    # -- IStreamingProvider implementation -------------------------------------

    async def get_current_track(self) -> CurrentTrackResult:
        response = await self._request("GET", "/me/player/currently-playing")
        if response.status_code == 204 or not response.content:
            self._logger.info("spotify_nothing_playing")
            return NothingPlaying()

        body = self._json(response)
        item = body.get("item")
        if not item:
            # Ads and some podcast states report a session without an item.
            self._logger.info(
                "spotify_nothing_playing",
                playing_type=body.get("currently_playing_type"),
            )
            return NothingPlaying()

        current = CurrentTrack(
            track=self._track_from_item(item),
            is_playing=bool(body.get("is_playing", False)),
            progress_ms=body.get("progress_ms"),
        )
        self._logger.info("spotify_current_track", track=current.track.name)
        return current

    async def get_top_tracks(self) -> TopTracks:
        time_range = self._settings.top_tracks_time_range
        response = await self._request(
            "GET",
            "/me/top/tracks",
            params={"time_range": time_range, "limit": self._settings.top_tracks_limit},
        )
        body = self._json(response)
        tracks = [self._track_from_item(item) for item in body.get("items") or [] if item]
        self._logger.info("spotify_top_tracks", time_range=time_range, count=len(tracks))
        return TopTracks(time_range=time_range, tracks=tracks)

    async def send_command(self, command: PlaybackCommand) -> None:
        method, path = _COMMAND_ROUTES[command]
        await self._request(method, path)

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME
