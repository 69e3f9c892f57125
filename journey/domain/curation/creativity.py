"""Creativity level -> candidate pool breadth policy."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Mapping

from journey.errors import InvalidArgument

MIN_LEVEL = 1
MAX_LEVEL = 10


class CreativityPolicy(str, enum.Enum):
    """Known creativity policies.

    BREADTH maps a level to (top tracks?, similar artists, recommendation limit).
    STRICTNESS is the percentage-strictness variant fed to a recommendation-only
    growth loop; it is recognised but has no table and cannot be resolved.
    """

    BREADTH = "breadth"
    STRICTNESS = "strictness"


@dataclass(frozen=True)
class CreativityProfile:
    use_top_tracks: bool
    similar_artist_breadth: int
    recommendation_limit: int

    def __post_init__(self):
        if self.similar_artist_breadth < 0 or self.recommendation_limit < 0:
            raise InvalidArgument("breadth and recommendation limit must be non-negative")


# Low levels stay close to the seed artist's own catalog; high levels lean on
# recommendations instead of top tracks.
BREADTH_TABLE: Mapping[int, CreativityProfile] = {
    1: CreativityProfile(True, 0, 0),
    2: CreativityProfile(True, 3, 0),
    3: CreativityProfile(True, 5, 0),
    4: CreativityProfile(True, 15, 0),
    5: CreativityProfile(True, 15, 25),
    6: CreativityProfile(True, 15, 50),
    7: CreativityProfile(True, 10, 50),
    8: CreativityProfile(False, 4, 100),
    9: CreativityProfile(False, 0, 100),
    10: CreativityProfile(False, 0, 20),
}

_TABLES: Dict[CreativityPolicy, Mapping[int, CreativityProfile]] = {
    CreativityPolicy.BREADTH: BREADTH_TABLE,
}


def _coerce_level(level: object) -> int:
    # bool is an int subclass; True/False are not levels
    if isinstance(level, bool):
        raise InvalidArgument(f"Creativity level must be an integer, got {level!r}")
    if isinstance(level, str):
        try:
            level = int(level.strip())
        except ValueError:
            raise InvalidArgument(f"Creativity level must be an integer, got {level!r}") from None
    if not isinstance(level, int):
        raise InvalidArgument(f"Creativity level must be an integer, got {level!r}")
    return level


def resolve_profile(level: object, policy: CreativityPolicy = CreativityPolicy.BREADTH) -> CreativityProfile:
    """Return the fixed profile for ``level`` (1-10) under ``policy``.

    Accepts numeric strings because the level usually arrives from a form field.
    """
    try:
        policy = CreativityPolicy(policy)
    except ValueError:
        raise InvalidArgument(f"Unknown creativity policy: {policy!r}") from None

    table = _TABLES.get(policy)
    if table is None:
        raise InvalidArgument(f"Creativity policy {policy.value!r} has no profile table")

    value = _coerce_level(level)
    if not MIN_LEVEL <= value <= MAX_LEVEL:
        raise InvalidArgument(f"Creativity level must be between {MIN_LEVEL} and {MAX_LEVEL}, got {value}")
    return table[value]


__all__ = [
    "BREADTH_TABLE",
    "CreativityPolicy",
    "CreativityProfile",
    "MAX_LEVEL",
    "MIN_LEVEL",
    "resolve_profile",
]
