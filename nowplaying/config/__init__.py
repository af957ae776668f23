"""Configuration module — exports Settings and load_config."""

from nowplaying.config.loader import load_config
from nowplaying.config.settings import Settings

__all__ = ["Settings", "load_config"]
