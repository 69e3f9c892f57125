"""Randomized greedy duration fitting with bounded replacement."""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional

from journey.errors import InfeasiblePool, InvalidArgument
from journey.models.dto import Track
from journey.models.playlist import SelectionResult

logger = logging.getLogger(__name__)

DEFAULT_OVERSHOOT_SECONDS = 120
DEFAULT_MAX_ATTEMPTS = 10000


def select_for_duration(
    pool: Iterable[Track],
    target_seconds: float,
    overshoot_seconds: float = DEFAULT_OVERSHOOT_SECONDS,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> SelectionResult:
    """Pick tracks whose total duration lands in ``[target, target + overshoot]``.

    Each attempt draws a random candidate. A candidate that fits under the
    ceiling is appended and removed from the pool. One that does not fit
    swaps a random already-selected track for a fresh random draw (the
    swapped-out track is dropped, not returned to the pool); with nothing
    selected yet the attempt does nothing.

    Args:
        pool: Candidate tracks. Copied; the caller's sequence is left untouched.
        target_seconds: Duration to reach, > 0.
        overshoot_seconds: Allowed excess over the target, >= 0.
        rng: Source of randomness; pass a seeded Random for reproducible runs.
        max_attempts: Upper bound on draws before giving up.

    Returns:
        A SelectionResult in insertion order, with the unused candidates in
        ``remaining``.

    Raises:
        InvalidArgument: on a non-positive target, negative overshoot or attempt bound.
        InfeasiblePool: when no track fits, the pool runs dry, or the attempt
            bound is hit before the window is reached.
    """
    if target_seconds is None or target_seconds <= 0:
        raise InvalidArgument(f"Target duration must be positive, got {target_seconds!r}")
    if overshoot_seconds is None or overshoot_seconds < 0:
        raise InvalidArgument(f"Overshoot must be non-negative, got {overshoot_seconds!r}")
    if max_attempts < 1:
        raise InvalidArgument(f"max_attempts must be at least 1, got {max_attempts!r}")

    rng = rng or random.Random()
    ceiling = target_seconds + overshoot_seconds
    remaining: List[Track] = list(pool)

    if not any(track.duration_seconds <= ceiling for track in remaining):
        raise InfeasiblePool(
            f"None of {len(remaining)} candidates fits under {ceiling:.0f}s", attempts=0
        )

    selected: List[Track] = []
    current = 0.0
    attempts = 0

    while not target_seconds <= current <= ceiling:
        if attempts >= max_attempts:
            raise InfeasiblePool(
                f"No fit within {max_attempts} attempts ({current:.0f}s of {target_seconds:.0f}s "
                f"with {len(selected)} selected)",
                attempts=attempts,
            )
        if not remaining:
            raise InfeasiblePool(
                f"Candidate pool exhausted at {current:.0f}s of {target_seconds:.0f}s",
                attempts=attempts,
            )
        attempts += 1

        track = rng.choice(remaining)
        if current + track.duration_seconds > ceiling:
            if selected:
                replacement = rng.choice(remaining)
                selected[rng.randrange(len(selected))] = replacement
                remaining.remove(replacement)
                current = sum(t.duration_seconds for t in selected)
            continue

        selected.append(track)
        current += track.duration_seconds
        remaining.remove(track)

    logger.info("Selected %d tracks: %.0fs for a %.0fs target (+%.0fs) after %d attempts",
                len(selected), current, target_seconds, overshoot_seconds, attempts)
    return SelectionResult(
        tracks=tuple(selected),
        achieved_duration_seconds=current,
        remaining=tuple(remaining),
        attempts=attempts,
    )


def shuffled(tracks: Iterable[Track], rng: random.Random) -> List[Track]:
    """Return a shuffled copy of ``tracks``."""
    items = list(tracks)
    rng.shuffle(items)
    return items


__all__ = ["DEFAULT_MAX_ATTEMPTS", "DEFAULT_OVERSHOOT_SECONDS", "select_for_duration", "shuffled"]
