"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml : Static knobs with no env var (token margin, app name)
#   2. .env file          : Local developer overrides (not committed)
#   3. Environment vars   : Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the values
# derived from Settings on top.  A key Settings supplies always wins, so
# the YAML file only carries keys Settings has no field for.  Secrets never appear in the merged dict;
# only the non-secret knobs (timeouts, cache TTL, top-tracks query) do.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from nowplaying.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings to merge.  A fresh ``Settings()`` is read when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "spotify": {
            "api_base_url": settings.spotify_api_base_url,
            "accounts_url": settings.spotify_accounts_url,
            "timeout_seconds": settings.upstream_timeout_seconds,
            "top_tracks": {
                "limit": settings.top_tracks_limit,
                "time_range": settings.top_tracks_time_range,
            },
            "credentials_configured": not settings.missing_spotify_credentials(),
        },
        "cache": {
            "ttl_seconds": settings.cache_ttl_seconds,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
