#!/usr/bin/env python
"""
Pydantic DTOs for catalog entities consumed by the curation engine.

Instances are frozen: a Track or Artist never changes after it has been
mapped from a provider payload.
"""

from __future__ import annotations

from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ArtistRef(BaseModel):
    """Primary artist of a track (name and catalog id)."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str = "Unknown Artist"


class Track(BaseModel):
    """A playable catalog track."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    artist: ArtistRef = Field(default_factory=ArtistRef)
    duration_seconds: float = Field(ge=0)
    preview_url: Optional[str] = None
    external_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.artist.name}  ---  {self.name}"


class Artist(BaseModel):
    """A catalog artist; ``images`` is ordered highest resolution first."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    genres: FrozenSet[str] = frozenset()
    images: Tuple[str, ...] = ()

    @property
    def image_url(self) -> Optional[str]:
        return self.images[0] if self.images else None


__all__ = ["Artist", "ArtistRef", "Track"]
