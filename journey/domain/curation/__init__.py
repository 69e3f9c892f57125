"""Curation domain: pool building, duration fitting and playlist materialization."""

from .creativity import CreativityPolicy, CreativityProfile, resolve_profile
from .materializer import PlaylistMaterializer, chunk_track_ids
from .pipeline import CurationContext, CurationEngine, CurationStrategy
from .pool_builder import CandidatePoolBuilder, target_artist_count
from .selector import select_for_duration

__all__ = [
    "CandidatePoolBuilder",
    "CreativityPolicy",
    "CreativityProfile",
    "CurationContext",
    "CurationEngine",
    "CurationStrategy",
    "PlaylistMaterializer",
    "chunk_track_ids",
    "resolve_profile",
    "select_for_duration",
    "target_artist_count",
]
