"""Abstract interfaces (ports) for the now-playing proxy.

Each interface defines the contract that a concrete adapter in
``nowplaying.providers`` must fulfil, so the coordinator and dispatcher
depend on abstractions rather than on Spotify or cachetools directly.
"""

from nowplaying.interfaces.cache_provider import ICacheProvider
from nowplaying.interfaces.streaming_provider import IStreamingProvider

__all__ = ["ICacheProvider", "IStreamingProvider"]
