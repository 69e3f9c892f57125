# journey/models/playlist.py

import dataclasses
from typing import Dict, List, Tuple

from journey.errors import PartialSubmissionFailure

from .dto import Track


@dataclasses.dataclass(frozen=True)
class SelectionResult:
    """
    Outcome of duration fitting.

    ``tracks`` is in insertion order; ``remaining`` is the unused part of the
    candidate pool handed back to the caller.
    """
    tracks: Tuple[Track, ...]
    achieved_duration_seconds: float
    remaining: Tuple[Track, ...] = ()
    attempts: int = 0

    @property
    def track_ids(self) -> List[str]:
        return [track.id for track in self.tracks]

    def __repr__(self):
        return (f"SelectionResult(tracks={len(self.tracks)}, "
                f"achieved={self.achieved_duration_seconds:.0f}s, remaining={len(self.remaining)})")


@dataclasses.dataclass
class PlaylistSubmission:
    """
    A remote playlist and the batches appended to it.
    """
    playlist_id: str
    track_ids: List[str]
    batches: List[List[str]] = dataclasses.field(default_factory=list)
    failed_batches: Dict[int, str] = dataclasses.field(default_factory=dict)  # batch index -> error

    @property
    def succeeded(self) -> bool:
        return not self.failed_batches

    @property
    def submitted_track_ids(self) -> List[str]:
        return [
            track_id
            for index, batch in enumerate(self.batches)
            if index not in self.failed_batches
            for track_id in batch
        ]

    def raise_for_failures(self) -> None:
        """Raise PartialSubmissionFailure when any batch was rejected."""
        if self.failed_batches:
            raise PartialSubmissionFailure(self)

    def __repr__(self):
        return (f"PlaylistSubmission(id='{self.playlist_id}', tracks={len(self.track_ids)}, "
                f"batches={len(self.batches)}, failed={sorted(self.failed_batches)})")
