#!/usr/bin/env python
# journey/config.py
import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file before reading them below
load_dotenv()

# Centralized configuration values for the curation engine


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


class Config:
    # Spotify API (names match the variables spotipy reads itself)
    SPOTIPY_CLIENT_ID = os.environ.get('SPOTIPY_CLIENT_ID')
    SPOTIPY_CLIENT_SECRET = os.environ.get('SPOTIPY_CLIENT_SECRET')
    SPOTIPY_REDIRECT_URI = os.environ.get('SPOTIPY_REDIRECT_URI')

    # Catalog lookups
    SPOTIFY_MARKET = os.getenv('SPOTIFY_MARKET', 'US')
    SPOTIFY_REQUEST_TIMEOUT = _get_float('SPOTIFY_REQUEST_TIMEOUT', 10.0)
    # Transport-level retries handled by spotipy (429/5xx); the engine itself never retries
    SPOTIFY_RETRIES = _get_int('SPOTIFY_RETRIES', 3)
    SEARCH_LIMIT = _get_int('SEARCH_LIMIT', 10)

    # Provider-side memoization of related artists / top tracks
    METADATA_CACHE_TTL_SECONDS = _get_int('METADATA_CACHE_TTL_SECONDS', 300)
    METADATA_CACHE_MAXSIZE = max(1, _get_int('METADATA_CACHE_MAXSIZE', 256))

    # Pool building
    POOL_MARGIN_SECONDS = _get_int('POOL_MARGIN_SECONDS', 300)
    TOPUP_MAX_ITERATIONS = _get_int('TOPUP_MAX_ITERATIONS', 100)
    ARTIST_EXPANSION_MAX_ROUNDS = _get_int('ARTIST_EXPANSION_MAX_ROUNDS', 200)
    # Parallel top-track fetches; 1 keeps every provider call sequential
    TOP_TRACKS_WORKERS = _get_int('TOP_TRACKS_WORKERS', 1)

    # Duration fitting
    OVERSHOOT_SECONDS = _get_int('OVERSHOOT_SECONDS', 120)
    SELECTION_MAX_ATTEMPTS = _get_int('SELECTION_MAX_ATTEMPTS', 10000)
    RANDOM_SEED = _get_optional_int('RANDOM_SEED')

    # Playlist materialization (Spotify accepts at most 100 items per append)
    PLAYLIST_BATCH_SIZE = _get_int('PLAYLIST_BATCH_SIZE', 100)
    PLAYLIST_NAME = os.getenv('PLAYLIST_NAME', 'Road Trip!')
    PLAYLIST_DESCRIPTION = os.getenv('PLAYLIST_DESCRIPTION', 'Made with love on Spotify Journey')
    PLAYLIST_PUBLIC = _get_bool('PLAYLIST_PUBLIC', False)

    # Logging
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')
    # Control console logging; when disabled, logs go only to file
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
