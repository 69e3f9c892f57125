import pytest
from hypothesis import given
from hypothesis import strategies as st

from journey.domain.curation.creativity import (
    BREADTH_TABLE,
    MAX_LEVEL,
    MIN_LEVEL,
    CreativityPolicy,
    CreativityProfile,
    resolve_profile,
)
from journey.errors import InvalidArgument


@pytest.mark.unit
@pytest.mark.parametrize(
    "level, expected",
    [
        (1, (True, 0, 0)),
        (2, (True, 3, 0)),
        (3, (True, 5, 0)),
        (4, (True, 15, 0)),
        (5, (True, 15, 25)),
        (6, (True, 15, 50)),
        (7, (True, 10, 50)),
        (8, (False, 4, 100)),
        (9, (False, 0, 100)),
        (10, (False, 0, 20)),
    ],
)
def test_breadth_profiles(level, expected):
    profile = resolve_profile(level)

    assert (profile.use_top_tracks, profile.similar_artist_breadth, profile.recommendation_limit) == expected


@pytest.mark.unit
@pytest.mark.parametrize("level", [0, 11, -3, 100])
def test_out_of_range_levels_are_rejected(level):
    with pytest.raises(InvalidArgument):
        resolve_profile(level)


@pytest.mark.unit
@pytest.mark.parametrize("level", [True, 2.5, None, "high", ""])
def test_non_integer_levels_are_rejected(level):
    with pytest.raises(InvalidArgument):
        resolve_profile(level)


@pytest.mark.unit
def test_numeric_string_levels_are_accepted():
    assert resolve_profile(" 7 ") is BREADTH_TABLE[7]


@pytest.mark.unit
def test_strictness_policy_has_no_table():
    with pytest.raises(InvalidArgument, match="no profile table"):
        resolve_profile(5, CreativityPolicy.STRICTNESS)


@pytest.mark.unit
def test_unknown_policy_is_rejected():
    with pytest.raises(InvalidArgument):
        resolve_profile(5, "chaos")


@pytest.mark.unit
def test_policy_may_be_given_by_value():
    assert resolve_profile(3, "breadth") is BREADTH_TABLE[3]


@pytest.mark.unit
def test_invalid_argument_is_a_value_error():
    with pytest.raises(ValueError):
        resolve_profile(0)


@pytest.mark.unit
def test_profile_rejects_negative_values():
    with pytest.raises(InvalidArgument):
        CreativityProfile(True, -1, 0)


@pytest.mark.unit
@given(st.integers(min_value=MIN_LEVEL, max_value=MAX_LEVEL))
def test_resolution_is_pure(level):
    assert resolve_profile(level) == resolve_profile(level)
    assert resolve_profile(level) == BREADTH_TABLE[level]


@pytest.mark.unit
@given(st.integers().filter(lambda value: value < MIN_LEVEL or value > MAX_LEVEL))
def test_every_level_outside_the_table_fails(level):
    with pytest.raises(InvalidArgument):
        resolve_profile(level)
