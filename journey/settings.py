#!/usr/bin/env python
"""
Validated runtime settings for a curation run.

Merges defaults from journey.config.Config with optional overrides (CLI
flags, tests) and normalizes the values the engine relies on.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from journey import config as _config

# Spotify rejects playlist append calls with more than 100 items
MAX_PLAYLIST_BATCH_SIZE = 100


class CurationSettings(BaseModel):
    """Settings consumed by the provider, pool builder, selector and materializer."""

    model_config = ConfigDict(extra="ignore")

    # Spotify credentials
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    spotify_redirect_uri: Optional[str] = None

    # Catalog
    market: str = "US"
    request_timeout: float = Field(default=10.0, gt=0)
    retries: int = Field(default=3, ge=0)
    search_limit: int = 10
    cache_ttl_seconds: int = 300
    cache_maxsize: int = 256

    # Pool building
    pool_margin_seconds: float = Field(default=300, ge=0)
    topup_max_iterations: int = Field(default=100, ge=1)
    expansion_max_rounds: int = Field(default=200, ge=1)
    top_tracks_workers: int = 1

    # Selection
    overshoot_seconds: float = Field(default=120, ge=0)
    selection_max_attempts: int = Field(default=10000, ge=1)
    random_seed: Optional[int] = None

    # Materialization
    batch_size: int = MAX_PLAYLIST_BATCH_SIZE
    playlist_name: str = "Road Trip!"
    playlist_description: str = "Made with love on Spotify Journey"
    playlist_public: bool = False

    @field_validator("market", mode="before")
    @classmethod
    def _normalize_market(cls, value: object) -> str:
        token = str(value or "").strip().upper()
        return token or "US"

    @field_validator("search_limit", mode="before")
    @classmethod
    def _clamp_search_limit(cls, value: object) -> int:
        try:
            limit = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 10
        # Spotify search pages hold at most 50 items
        return max(1, min(limit, 50))

    @field_validator("batch_size", mode="before")
    @classmethod
    def _clamp_batch_size(cls, value: object) -> int:
        try:
            size = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return MAX_PLAYLIST_BATCH_SIZE
        return max(1, min(size, MAX_PLAYLIST_BATCH_SIZE))

    @field_validator("top_tracks_workers", mode="before")
    @classmethod
    def _coerce_workers(cls, value: object) -> int:
        try:
            workers = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 1
        return max(1, min(workers, 16))

    @field_validator("cache_ttl_seconds", "cache_maxsize", mode="before")
    @classmethod
    def _positive_cache_values(cls, value: object) -> int:
        try:
            number = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 1
        return max(1, number)

    @field_validator("playlist_name")
    @classmethod
    def _validate_playlist_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            return "Road Trip!"
        # Spotify playlist names are capped at 100 characters
        return cleaned[:100]


def load_curation_settings(overrides: Optional[Dict[str, Any]] = None) -> CurationSettings:
    """Load settings merging config defaults with optional runtime overrides."""
    Config = _config.Config
    data: Dict[str, Any] = {
        "spotify_client_id": Config.SPOTIPY_CLIENT_ID,
        "spotify_client_secret": Config.SPOTIPY_CLIENT_SECRET,
        "spotify_redirect_uri": Config.SPOTIPY_REDIRECT_URI,
        "market": Config.SPOTIFY_MARKET,
        "request_timeout": Config.SPOTIFY_REQUEST_TIMEOUT,
        "retries": Config.SPOTIFY_RETRIES,
        "search_limit": Config.SEARCH_LIMIT,
        "cache_ttl_seconds": Config.METADATA_CACHE_TTL_SECONDS,
        "cache_maxsize": Config.METADATA_CACHE_MAXSIZE,
        "pool_margin_seconds": Config.POOL_MARGIN_SECONDS,
        "topup_max_iterations": Config.TOPUP_MAX_ITERATIONS,
        "expansion_max_rounds": Config.ARTIST_EXPANSION_MAX_ROUNDS,
        "top_tracks_workers": Config.TOP_TRACKS_WORKERS,
        "overshoot_seconds": Config.OVERSHOOT_SECONDS,
        "selection_max_attempts": Config.SELECTION_MAX_ATTEMPTS,
        "random_seed": Config.RANDOM_SEED,
        "batch_size": Config.PLAYLIST_BATCH_SIZE,
        "playlist_name": Config.PLAYLIST_NAME,
        "playlist_description": Config.PLAYLIST_DESCRIPTION,
        "playlist_public": Config.PLAYLIST_PUBLIC,
    }
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})
    return CurationSettings.model_validate(data)


__all__ = [
    "CurationSettings",
    "MAX_PLAYLIST_BATCH_SIZE",
    "load_curation_settings",
]
