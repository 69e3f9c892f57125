#!/usr/bin/env python
"""
Spotify Web API payload -> DTO conversion utilities.

spotipy returns plain dicts; these helpers turn them into the frozen Track
and Artist models the curation stages work with. A payload missing a
required key raises KeyError/TypeError, which the provider reports as a
ProviderError.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from journey.models.dto import Artist, ArtistRef, Track


def _spotify_url(payload: Dict[str, Any]) -> Optional[str]:
    return (payload.get("external_urls") or {}).get("spotify")


def track_from_payload(payload: Dict[str, Any]) -> Track:
    artists = payload.get("artists") or []
    primary = artists[0] if artists else {}
    return Track(
        id=payload["id"],
        name=payload["name"],
        artist=ArtistRef(id=primary.get("id"), name=primary.get("name") or "Unknown Artist"),
        duration_seconds=int(payload["duration_ms"]) / 1000,
        preview_url=payload.get("preview_url"),
        external_url=_spotify_url(payload),
    )


def artist_from_payload(payload: Dict[str, Any]) -> Artist:
    # Spotify lists images largest first; keep that order
    images = tuple(image["url"] for image in payload.get("images") or [] if image.get("url"))
    return Artist(
        id=payload["id"],
        name=payload["name"],
        genres=frozenset(payload.get("genres") or ()),
        images=images,
    )


def tracks_from_payloads(payloads: Iterable[Optional[Dict[str, Any]]]) -> List[Track]:
    """Map a list of track payloads, skipping null entries and unplayable local files."""
    tracks: List[Track] = []
    for payload in payloads:
        # Search/recommendation pages can contain nulls and id-less local tracks
        if not payload or not payload.get("id"):
            continue
        tracks.append(track_from_payload(payload))
    return tracks


def artists_from_payloads(payloads: Iterable[Optional[Dict[str, Any]]]) -> List[Artist]:
    return [artist_from_payload(payload) for payload in payloads if payload and payload.get("id")]


__all__ = [
    "artist_from_payload",
    "artists_from_payloads",
    "track_from_payload",
    "tracks_from_payloads",
]
