"""Streaming-service provider implementations.

Currently only SpotifyProvider.  Another service can be fronted by adding an
IStreamingProvider implementation here and selecting it in ``main._build_all``.
"""

from nowplaying.providers.streaming.spotify_provider import SpotifyProvider

__all__ = ["SpotifyProvider"]
