"""Catalog domain: Spotify-backed provider and payload mapping."""

from .provider import CatalogProvider, SpotifyCatalogProvider, build_spotify_client

__all__ = ["CatalogProvider", "SpotifyCatalogProvider", "build_spotify_client"]
