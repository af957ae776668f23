"""Playback command dispatcher.

Forwards player commands to the streaming provider and, once the provider
has accepted one, invalidates the cached current track so the next read
of ``/`` reflects the new player state.
"""

from __future__ import annotations

import structlog

from nowplaying.interfaces.streaming_provider import IStreamingProvider
from nowplaying.models.cache import CacheKey
from nowplaying.models.playback import PlaybackCommand
from nowplaying.services.cache_coordinator import CacheCoordinator
from nowplaying.utils.logging import get_logger


class PlaybackDispatcher:
    """Sends playback commands and keeps the current-track cache honest.

    No retries are performed here.  A failure is reported as-is and the
    caller decides whether to try again.
    """

    def __init__(self, provider: IStreamingProvider, coordinator: CacheCoordinator) -> None:
        self._provider = provider
        self._coordinator = coordinator
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def execute(self, command: PlaybackCommand | str) -> PlaybackCommand:
        """Run *command* against the user's active device.

        Parameters
        ----------
        command:
            A :class:`PlaybackCommand` or its path-segment spelling
            (``"play"``, ``"pause"``, ``"next"``, ``"previous"``).

        Returns
        -------
        PlaybackCommand
            The command that was executed.

        Raises
        ------
        InvalidCommandError
            If *command* is not a known command.  Raised before any
            upstream call.
        UpstreamUnavailableError, UpstreamRejectedError
            Propagated unchanged from the provider; the cache is untouched.
        """
        parsed = PlaybackCommand.parse(command)

        await self._provider.send_command(parsed)
        self._logger.info(
            "playback_command_sent",
            command=parsed.value,
            provider=self._provider.get_provider_name(),
        )

        # Must complete before we return: the caller's success response is
        # what tells clients it is safe to read the new state.
        await self._coordinator.invalidate(CacheKey.CURRENT_TRACK)
        return parsed
