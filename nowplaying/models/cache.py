"""Cache keys and entries shared by the store and the coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CacheKey(str, Enum):  # noqa: UP042: StrEnum requires Python 3.11+
    """The fixed set of resources the proxy caches."""

    CURRENT_TRACK = "current-track"
    TOP_TRACKS = "top-tracks"


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the absolute time at which it stops being valid.

    Attributes
    ----------
    value:
        The domain object returned by the upstream fetch.
    expires_at:
        Timestamp on the store's clock.  The entry is treated as absent
        once ``now >= expires_at``.
    """

    value: Any
    expires_at: float
