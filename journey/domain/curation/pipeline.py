import enum
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from uuid import uuid4

from journey.domain.catalog import SpotifyCatalogProvider
from journey.errors import InvalidArgument
from journey.models.dto import Artist, Track
from journey.models.playlist import PlaylistSubmission, SelectionResult
from journey.observability import run_context
from journey.settings import CurationSettings, load_curation_settings

from .creativity import CreativityPolicy, CreativityProfile, resolve_profile
from .materializer import PlaylistMaterializer
from .pool_builder import CandidatePoolBuilder, pool_duration
from .selector import select_for_duration, shuffled

logger = logging.getLogger(__name__)


class CurationStrategy(str, enum.Enum):
    ARTIST_GRAPH = "artist_graph"
    POLICY = "policy"


@dataclass
class CurationContext:
    """Everything one curation run produces, passed from stage to stage.

    A context belongs to a single run and is never shared.
    """
    trip_duration_seconds: float
    strategy: CurationStrategy = CurationStrategy.ARTIST_GRAPH
    seed_artist: Optional[Artist] = None
    seed: Optional[str] = None
    search_type: str = "artist"
    creativity_level: Optional[int] = None
    policy: CreativityPolicy = CreativityPolicy.BREADTH
    overshoot_seconds: Optional[float] = None
    run_id: str = field(default_factory=lambda: uuid4().hex)
    rng: random.Random = field(default_factory=random.Random)

    profile: Optional[CreativityProfile] = None
    artists: List[Artist] = field(default_factory=list)
    pool: List[Track] = field(default_factory=list)
    selection: Optional[SelectionResult] = None
    playlist_tracks: List[Track] = field(default_factory=list)
    submission: Optional[PlaylistSubmission] = None

    @property
    def achieved_duration_seconds(self) -> float:
        return self.selection.achieved_duration_seconds if self.selection else 0.0


class CurationEngine:
    """Entry point for pool building, duration fitting and playlist materialization."""

    def __init__(self, provider=None, settings: Optional[CurationSettings] = None,
                 rng: Optional[random.Random] = None):
        self.settings = settings or load_curation_settings()
        if provider is None:
            provider = SpotifyCatalogProvider(settings=self.settings)
        self.provider = provider
        self.rng = rng or random.Random(self.settings.random_seed)
        self.materializer = PlaylistMaterializer(self.provider, self.settings)

    def _pool_builder(self, rng: Optional[random.Random] = None) -> CandidatePoolBuilder:
        return CandidatePoolBuilder(self.provider, self.settings, rng or self.rng)

    def new_context(self, trip_duration_seconds: float, **kwargs) -> CurationContext:
        """Create a run context whose RNG derives from the engine's seed."""
        kwargs.setdefault("rng", random.Random(self.rng.getrandbits(64)))
        return CurationContext(trip_duration_seconds=trip_duration_seconds, **kwargs)

    def search_artists(self, query: str, offset: int = 0) -> List[Artist]:
        return self.provider.search_artists(query, limit=self.settings.search_limit, offset=offset)

    def search_tracks(self, query: str, offset: int = 0) -> List[Track]:
        return self.provider.search_tracks(query, limit=self.settings.search_limit, offset=offset)

    def build_artist_expanded_pool(self, seed_artist: Artist, trip_duration_seconds: float,
                                   rng: Optional[random.Random] = None) -> List[Track]:
        return self._pool_builder(rng).build_artist_expanded_pool(seed_artist, trip_duration_seconds)

    def build_policy_expanded_pool(self, seed: str, search_type: str, creativity_level: int,
                                   trip_duration_seconds: float,
                                   policy: CreativityPolicy = CreativityPolicy.BREADTH,
                                   rng: Optional[random.Random] = None) -> List[Track]:
        profile = resolve_profile(creativity_level, policy)
        return self._pool_builder(rng).build_policy_expanded_pool(
            seed, search_type, profile, trip_duration_seconds
        )

    def select_for_duration(self, pool: Sequence[Track], target_seconds: float,
                            overshoot_seconds: Optional[float] = None,
                            rng: Optional[random.Random] = None) -> SelectionResult:
        overshoot = self.settings.overshoot_seconds if overshoot_seconds is None else overshoot_seconds
        return select_for_duration(
            pool,
            target_seconds,
            overshoot,
            rng=rng or self.rng,
            max_attempts=self.settings.selection_max_attempts,
        )

    def materialize_playlist(self, name: Optional[str], description: Optional[str],
                             ordered_track_ids: Sequence[str]) -> PlaylistSubmission:
        return self.materializer.materialize(name, description, ordered_track_ids)

    def curate(self, context: CurationContext, name: Optional[str] = None,
               description: Optional[str] = None, dry_run: bool = False) -> CurationContext:
        """Run every stage over ``context`` and return it filled in.

        With ``dry_run`` the selection is made but no playlist is created.
        """
        with run_context(context.run_id):
            logger.info("Curation run started: strategy=%s trip=%.0fs",
                        context.strategy.value, context.trip_duration_seconds)
            builder = self._pool_builder(context.rng)

            if context.strategy is CurationStrategy.ARTIST_GRAPH:
                if context.seed_artist is None:
                    raise InvalidArgument("Artist-graph curation needs a seed artist")
                context.artists = builder.expand_artists(context.seed_artist, context.trip_duration_seconds)
                context.pool = builder.flatten_artist_tracks(context.artists)
            else:
                if not context.seed:
                    raise InvalidArgument("Policy curation needs a seed id")
                context.profile = resolve_profile(context.creativity_level, context.policy)
                context.pool = builder.build_policy_expanded_pool(
                    context.seed, context.search_type, context.profile, context.trip_duration_seconds
                )

            # Shuffle before selection so low-index tracks are not favoured, and
            # after so the order does not reflect when each track was picked
            candidates = shuffled(context.pool, context.rng)
            context.selection = self.select_for_duration(
                candidates, context.trip_duration_seconds, context.overshoot_seconds, rng=context.rng
            )
            context.playlist_tracks = shuffled(context.selection.tracks, context.rng)

            for track in context.playlist_tracks:
                logger.info("%s", track.display_name)
            logger.info("Playlist is %.0f seconds compared to the drive which is %.0f (pool %d tracks, %.0fs)",
                        context.achieved_duration_seconds, context.trip_duration_seconds,
                        len(context.pool), pool_duration(context.pool))

            if dry_run:
                logger.info("Dry run: skipping playlist creation")
                return context

            context.submission = self.materialize_playlist(
                name, description, [track.id for track in context.playlist_tracks]
            )
            return context


__all__ = ["CurationContext", "CurationEngine", "CurationStrategy"]
