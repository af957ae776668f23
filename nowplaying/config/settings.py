"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables**: e.g., SPOTIFY_CLIENT_ID=abc123
#   2. **.env file**: key=value lines in the project root .env file
#
# Field name `spotify_client_id` maps to env var `SPOTIFY_CLIENT_ID`.
# `app_port` additionally accepts the bare `PORT` variable that hosting
# platforms (Render, Fly, Heroku) inject.
#
# SECURITY: the refresh token grants full player control over the account.
# Keep it in .env (git-ignored) or the deploy environment, never in YAML.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Now-playing proxy settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === Spotify credentials ===
    # Empty string = "not configured"; _build_all refuses to start without them.
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_refresh_token: str = ""

    # === Spotify endpoints ===
    spotify_api_base_url: str = "https://api.spotify.com/v1"
    spotify_accounts_url: str = "https://accounts.spotify.com/api/token"

    # === Upstream behaviour ===
    upstream_timeout_seconds: float = 10.0
    top_tracks_limit: int = 10
    top_tracks_time_range: str = "short_term"

    # === Cache ===
    cache_ttl_seconds: float = 10.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = Field(
        default=3001,
        validation_alias=AliasChoices("app_port", "PORT"),
    )
    app_env: str = "development"
    log_level: str = "INFO"

    def missing_spotify_credentials(self) -> list[str]:
        """Return the env var names of Spotify credentials that are not set."""
        missing: list[str] = []
        if not self.spotify_client_id:
            missing.append("SPOTIFY_CLIENT_ID")
        if not self.spotify_client_secret:
            missing.append("SPOTIFY_CLIENT_SECRET")
        if not self.spotify_refresh_token:
            missing.append("SPOTIFY_REFRESH_TOKEN")
        return missing
