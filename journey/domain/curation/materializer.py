import logging
from typing import List, Optional, Sequence

from journey.errors import ProviderError
from journey.models.playlist import PlaylistSubmission
from journey.settings import MAX_PLAYLIST_BATCH_SIZE, CurationSettings, load_curation_settings

logger = logging.getLogger(__name__)


def chunk_track_ids(track_ids: Sequence[str], batch_size: int = MAX_PLAYLIST_BATCH_SIZE) -> List[List[str]]:
    """Split ids into consecutive batches of at most ``batch_size``, preserving order."""
    if batch_size < 1:
        raise ValueError("batch_size must be positive")
    return [list(track_ids[start:start + batch_size]) for start in range(0, len(track_ids), batch_size)]


class PlaylistMaterializer:
    """Creates a remote playlist and appends tracks to it in fixed-size batches.

    Not idempotent: every call to ``materialize`` creates a new playlist.
    """

    def __init__(self, provider, settings: Optional[CurationSettings] = None):
        self.provider = provider
        self.settings = settings or load_curation_settings()

    def materialize(self, name: Optional[str], description: Optional[str],
                    track_ids: Sequence[str]) -> PlaylistSubmission:
        name = name or self.settings.playlist_name
        description = self.settings.playlist_description if description is None else description

        # Playlist creation failures are fatal; nothing has been written yet
        user_id = self.provider.get_current_user()
        playlist_id = self.provider.create_playlist(
            user_id, name, description=description, public=self.settings.playlist_public
        )

        submission = PlaylistSubmission(
            playlist_id=playlist_id,
            track_ids=list(track_ids),
            batches=chunk_track_ids(track_ids, self.settings.batch_size),
        )
        self.append_batches(submission)

        if submission.failed_batches:
            logger.warning("Playlist %s created with %d/%d batches failing; %d of %d tracks added",
                           playlist_id, len(submission.failed_batches), len(submission.batches),
                           len(submission.submitted_track_ids), len(submission.track_ids))
        else:
            logger.info("Playlist %s populated with %d tracks in %d batches",
                        playlist_id, len(submission.track_ids), len(submission.batches))
        return submission

    def append_batches(self, submission: PlaylistSubmission,
                       indices: Optional[Sequence[int]] = None) -> PlaylistSubmission:
        """Append batches in order, recording failures instead of aborting.

        ``indices`` limits the call to specific batches, e.g. to resubmit the
        ones that failed previously.
        """
        targets = range(len(submission.batches)) if indices is None else indices
        for index in targets:
            batch = submission.batches[index]
            try:
                self.provider.append_tracks(submission.playlist_id, batch)
            except ProviderError as exc:
                logger.error("Error adding chunk %d to playlist %s: %s", index + 1, submission.playlist_id, exc)
                submission.failed_batches[index] = str(exc)
            else:
                submission.failed_batches.pop(index, None)
        return submission


__all__ = ["PlaylistMaterializer", "chunk_track_ids"]
