"""Data carriers shared across the curation stages."""

from .dto import Artist, ArtistRef, Track
from .playlist import PlaylistSubmission, SelectionResult

__all__ = ["Artist", "ArtistRef", "PlaylistSubmission", "SelectionResult", "Track"]
