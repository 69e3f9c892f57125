"""Candidate pool construction.

Two strategies build an over-long list of candidate tracks for the
duration-fit selector:

* artist-graph expansion grows a list of related artists from one seed
  artist (more driving time, more artists) and flattens their top tracks;
* policy-driven expansion follows a CreativityProfile, mixing top tracks of
  the seed's related artists with recommendation batches, then tops the pool
  up until it comfortably exceeds the trip duration.

The pool is append-only and not deduplicated. A ProviderError raised while
building carries the tracks (or artists) gathered so far in ``partial``.
"""

import contextvars
import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Sequence

from journey.errors import ExpansionExhausted, InvalidArgument, ProviderError
from journey.models.dto import Artist, Track
from journey.settings import CurationSettings, load_curation_settings

from .creativity import CreativityProfile

logger = logging.getLogger(__name__)

# Two more artists per half hour of driving, on top of a floor of six
SECONDS_PER_ARTIST_STEP = 1800
ARTISTS_PER_STEP = 2
BASE_ARTIST_COUNT = 6


def target_artist_count(trip_duration_seconds: float) -> int:
    return math.floor(trip_duration_seconds / SECONDS_PER_ARTIST_STEP) * ARTISTS_PER_STEP + BASE_ARTIST_COUNT


def pool_duration(tracks: Sequence[Track]) -> float:
    return sum(track.duration_seconds for track in tracks)


def normalize_seed_kind(search_type: str) -> str:
    kind = (search_type or "").strip().lower()
    if kind == "artist":
        return "artist"
    if kind in ("track", "song"):
        return "track"
    raise InvalidArgument(f"Invalid search type: {search_type!r}")


def _require_positive_duration(trip_duration_seconds: float) -> None:
    if trip_duration_seconds is None or trip_duration_seconds <= 0:
        raise InvalidArgument(f"Trip duration must be positive, got {trip_duration_seconds!r}")


class CandidatePoolBuilder:
    def __init__(self, provider, settings: Optional[CurationSettings] = None,
                 rng: Optional[random.Random] = None):
        self.provider = provider
        self.settings = settings or load_curation_settings()
        self.rng = rng or random.Random(self.settings.random_seed)

    # -- shared helpers -------------------------------------------------

    def _iter_top_tracks(self, artist_ids: Sequence[str]) -> Iterator[List[Track]]:
        """Yield top tracks per artist, in ``artist_ids`` order."""
        workers = self.settings.top_tracks_workers
        if workers <= 1 or len(artist_ids) <= 1:
            for artist_id in artist_ids:
                yield self.provider.top_tracks(artist_id)
            return

        # each call runs in a copy of the caller's context so run-scoped logging survives
        contexts = [contextvars.copy_context() for _ in artist_ids]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="top-tracks") as executor:
            yield from executor.map(
                lambda ctx, artist_id: ctx.run(self.provider.top_tracks, artist_id),
                contexts,
                artist_ids,
            )

    def collect_top_tracks(self, artist_ids: Sequence[str]) -> List[Track]:
        pool: List[Track] = []
        try:
            for tracks in self._iter_top_tracks(artist_ids):
                pool.extend(tracks)
        except ProviderError as exc:
            exc.partial = list(pool)
            raise
        return pool

    # -- strategy A: artist-graph expansion -----------------------------

    def expand_artists(self, seed_artist: Artist, trip_duration_seconds: float) -> List[Artist]:
        """Grow the artist list to exactly ``target_artist_count(trip_duration_seconds)``.

        The seed is the first base; every later base is a random discovered
        index that has not been queried yet.
        """
        _require_positive_duration(trip_duration_seconds)
        target = target_artist_count(trip_duration_seconds)
        artists: List[Artist] = [seed_artist]
        used_indices = set()
        base_index = 0
        rounds = 0

        while len(artists) < target:
            rounds += 1
            if rounds > self.settings.expansion_max_rounds:
                raise ExpansionExhausted(
                    f"Artist expansion exceeded {self.settings.expansion_max_rounds} rounds "
                    f"with {len(artists)} of {target} artists",
                    partial=artists,
                )
            used_indices.add(base_index)
            base = artists[base_index]
            try:
                related = self.provider.related_artists(base.id)
            except ProviderError as exc:
                exc.partial = list(artists)
                raise
            artists.extend(related[:target - len(artists)])
            logger.debug("Expanded from %s: %d related, %d/%d artists", base.name, len(related), len(artists), target)
            if len(artists) >= target:
                break

            unused = [index for index in range(len(artists)) if index not in used_indices]
            if not unused:
                raise ExpansionExhausted(
                    f"No unused base artists left with {len(artists)} of {target} artists",
                    partial=artists,
                )
            base_index = self.rng.choice(unused)

        logger.info("Artist list for %.0fs trip: %d artists seeded by %s",
                    trip_duration_seconds, len(artists), seed_artist.name)
        return artists

    def flatten_artist_tracks(self, artists: Sequence[Artist]) -> List[Track]:
        """Seed's top tracks, then those of every artist except the first and last."""
        if not artists:
            return []
        artist_ids = [artists[0].id] + [artist.id for artist in artists[1:-1]]
        return self.collect_top_tracks(artist_ids)

    def build_artist_expanded_pool(self, seed_artist: Artist, trip_duration_seconds: float) -> List[Track]:
        artists = self.expand_artists(seed_artist, trip_duration_seconds)
        pool = self.flatten_artist_tracks(artists)
        logger.info("Artist-expanded pool: %d tracks, %.0fs", len(pool), pool_duration(pool))
        return pool

    # -- strategy B: policy-driven recommendation expansion -------------

    def resolve_seed_artist(self, seed: str, seed_kind: str) -> str:
        if seed_kind == "artist":
            return seed
        track = self.provider.get_track(seed)
        if not track.artist.id:
            raise ProviderError(f"resolve primary artist of track {seed}")
        return track.artist.id

    def build_policy_expanded_pool(self, seed: str, search_type: str, profile: CreativityProfile,
                                   trip_duration_seconds: float) -> List[Track]:
        _require_positive_duration(trip_duration_seconds)
        seed_kind = normalize_seed_kind(search_type)
        pool: List[Track] = []
        try:
            seed_artist_id = self.resolve_seed_artist(seed, seed_kind)

            related: List[Artist] = []
            if profile.similar_artist_breadth > 0:
                related = self.provider.related_artists(seed_artist_id)

            if profile.use_top_tracks:
                pool.extend(self.provider.top_tracks(seed_artist_id))
                breadth_ids = [artist.id for artist in related[:profile.similar_artist_breadth]]
                for tracks in self._iter_top_tracks(breadth_ids):
                    pool.extend(tracks)

            if profile.recommendation_limit > 0:
                pool.extend(self.provider.recommendations(seed_kind, seed, profile.recommendation_limit))

            self._top_up(pool, seed, seed_kind, profile, related, trip_duration_seconds)
        except ProviderError as exc:
            exc.partial = list(pool)
            raise

        logger.info("Policy-expanded pool: %d tracks, %.0fs for a %.0fs trip",
                    len(pool), pool_duration(pool), trip_duration_seconds)
        return pool

    def _top_up(self, pool: List[Track], seed: str, seed_kind: str, profile: CreativityProfile,
                related: Sequence[Artist], trip_duration_seconds: float) -> None:
        """Append more candidates until the pool exceeds the trip plus margin."""
        threshold = trip_duration_seconds + self.settings.pool_margin_seconds
        total = pool_duration(pool)
        cursor = min(profile.similar_artist_breadth, len(related))
        iteration = 0

        while total < threshold:
            more_related = profile.use_top_tracks and cursor < len(related)
            if not more_related and profile.recommendation_limit <= 0:
                logger.warning("Candidate sources exhausted at %.0fs of %.0fs", total, threshold)
                return
            if iteration >= self.settings.topup_max_iterations:
                logger.warning("Top-up stopped after %d iterations at %.0fs of %.0fs",
                               iteration, total, threshold)
                return
            iteration += 1

            added: List[Track] = []
            if more_related:
                added.extend(self.provider.top_tracks(related[cursor].id))
                cursor += 1
            if profile.recommendation_limit > 0:
                added.extend(self.provider.recommendations(seed_kind, seed, profile.recommendation_limit))
            pool.extend(added)
            total += pool_duration(added)
            logger.debug("Top-up iteration %d added %d tracks (%.0fs total)", iteration, len(added), total)


__all__ = [
    "CandidatePoolBuilder",
    "normalize_seed_kind",
    "pool_duration",
    "target_artist_count",
]
