"""Playback command value object."""

from __future__ import annotations

from enum import Enum

from nowplaying.utils.errors import InvalidCommandError


class PlaybackCommand(str, Enum):  # noqa: UP042: StrEnum requires Python 3.11+
    """Player actions accepted on ``/player/{player_state}``.

    The value is the exact path segment; matching is case-insensitive.
    """

    PLAY = "play"
    PAUSE = "pause"
    NEXT = "next"
    PREVIOUS = "previous"

    @classmethod
    def parse(cls, raw: str | PlaybackCommand) -> PlaybackCommand:
        """Return the command named by *raw*.

        Raises
        ------
        InvalidCommandError
            If *raw* is not one of ``play``, ``pause``, ``next``, ``previous``.
        """
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            allowed = ", ".join(c.value for c in cls)
            raise InvalidCommandError(
                message=f"Unknown player state '{raw}'. Expected one of: {allowed}",
            ) from None
