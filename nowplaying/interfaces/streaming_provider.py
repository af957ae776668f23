"""Abstract base class for music-streaming service providers.

Defines the three upstream capabilities the proxy consumes: the current
track, the user's top tracks, and player commands.  Authentication (token
acquisition and refresh) is entirely the provider's concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from nowplaying.models.playback import PlaybackCommand
from nowplaying.models.track import CurrentTrackResult, TopTracks


class IStreamingProvider(ABC):
    """Contract for a streaming service account the proxy fronts."""

    @abstractmethod
    async def get_current_track(self) -> CurrentTrackResult:
        """Fetch what the user is listening to.

        Returns
        -------
        CurrentTrack or NothingPlaying
            ``NothingPlaying`` when the service reports no active session.

        Raises
        ------
        nowplaying.utils.errors.UpstreamUnavailableError
            On network failures and 5xx responses.
        nowplaying.utils.errors.UpstreamRejectedError
            On 4xx responses.
        """

    @abstractmethod
    async def get_top_tracks(self) -> TopTracks:
        """Fetch the user's short-term top tracks.

        Raises
        ------
        nowplaying.utils.errors.UpstreamUnavailableError
        nowplaying.utils.errors.UpstreamRejectedError
        """

    @abstractmethod
    async def send_command(self, command: PlaybackCommand) -> None:
        """Send a player command to the user's active device.

        Raises
        ------
        nowplaying.utils.errors.UpstreamUnavailableError
        nowplaying.utils.errors.UpstreamRejectedError
            E.g. when no playback device is active.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier used in logs and error messages."""
