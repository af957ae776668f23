"""Caching proxy in front of the Spotify Web API for a personal now-playing widget."""

__version__ = "0.1.0"
