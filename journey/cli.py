"""Command line interface for building road-trip playlists."""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from journey.config import Config
from journey.domain.curation import CreativityPolicy, CurationEngine, CurationStrategy
from journey.errors import CurationError, InvalidArgument, PartialSubmissionFailure
from journey.observability import configure_logging
from journey.settings import load_curation_settings

logger = logging.getLogger(__name__)


def _format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(round(seconds)), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m {secs:02d}s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="journey", description="Build a Spotify playlist as long as your drive.")
    parser.add_argument("--log-dir", default=None, help="Directory for per-run log files")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("search-artists", "Search the catalog for artists"),
                            ("search-tracks", "Search the catalog for tracks")):
        search = sub.add_parser(name, help=help_text)
        search.add_argument("query")
        search.add_argument("--offset", type=int, default=0)

    def add_run_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("--minutes", type=float, required=True, help="Trip duration in minutes")
        p.add_argument("--overshoot", type=float, default=None, help="Allowed excess in seconds")
        p.add_argument("--random-seed", type=int, default=None, help="Random seed for reproducible runs")
        p.add_argument("--name", default=None, help="Playlist name")
        p.add_argument("--description", default=None, help="Playlist description")
        p.add_argument("--dry-run", action="store_true", help="Select tracks without creating a playlist")

    artist_run = sub.add_parser("curate-artist", help="Expand related artists from a seed artist")
    artist_run.add_argument("artist", help="Artist name to search for; the first match seeds the run")
    add_run_options(artist_run)

    policy_run = sub.add_parser("curate", help="Expand from a seed artist/track id under a creativity level")
    policy_run.add_argument("seed_id", help="Spotify artist or track id")
    policy_run.add_argument("--type", dest="search_type", choices=["artist", "track", "song"], default="artist")
    policy_run.add_argument("--creativity", type=int, default=5, help="1 (familiar) to 10 (adventurous)")
    policy_run.add_argument("--policy", choices=[p.value for p in CreativityPolicy], default=CreativityPolicy.BREADTH.value,
                            help="How the creativity level maps to pool breadth")
    add_run_options(policy_run)
    return parser


def _print_context(context) -> None:
    for index, track in enumerate(context.playlist_tracks, start=1):
        print(f"{index:3d}. {track.display_name} ({_format_duration(track.duration_seconds)})")
    print(f"Playlist: {_format_duration(context.achieved_duration_seconds)} "
          f"for a {_format_duration(context.trip_duration_seconds)} drive")
    if context.submission is not None:
        print(f"Created playlist {context.submission.playlist_id}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(args.log_dir or Config.LOG_DIR, enable_console=Config.ENABLE_CONSOLE_LOGS,
                      log_format=Config.LOG_FORMAT)

    try:
        settings = load_curation_settings({"random_seed": getattr(args, "random_seed", None)})
        engine = CurationEngine(settings=settings)
        if args.command == "search-artists":
            for artist in engine.search_artists(args.query, offset=args.offset):
                print(f"{artist.id}  {artist.name}  [{', '.join(sorted(artist.genres))}]")
            return 0
        if args.command == "search-tracks":
            for track in engine.search_tracks(args.query, offset=args.offset):
                print(f"{track.id}  {track.display_name}  ({_format_duration(track.duration_seconds)})")
            return 0

        trip_seconds = args.minutes * 60
        if args.command == "curate-artist":
            matches = engine.search_artists(args.artist)
            if not matches:
                print(f"No artist found for {args.artist!r}", file=sys.stderr)
                return 1
            context = engine.new_context(trip_seconds, strategy=CurationStrategy.ARTIST_GRAPH,
                                         seed_artist=matches[0], overshoot_seconds=args.overshoot)
        else:
            context = engine.new_context(trip_seconds, strategy=CurationStrategy.POLICY, seed=args.seed_id,
                                         search_type=args.search_type, creativity_level=args.creativity,
                                         policy=CreativityPolicy(args.policy),
                                         overshoot_seconds=args.overshoot)

        engine.curate(context, name=args.name, description=args.description, dry_run=args.dry_run)
        _print_context(context)
        if context.submission is not None:
            context.submission.raise_for_failures()
        return 0
    except PartialSubmissionFailure as exc:
        print(f"Warning: {exc}", file=sys.stderr)
        return 3
    except (InvalidArgument, ValidationError) as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2
    except CurationError as exc:
        logger.error("Curation failed: %s", exc, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
