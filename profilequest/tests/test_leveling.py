import math

import pytest

from profilequest.core.errors import InvalidAmount
from profilequest.services.leveling import (
    LevelState,
    apply_xp,
    compute_level,
    cumulative_xp_for_level,
    next_threshold,
    threshold_for_level,
    total_xp_for,
)


def test_zero_xp_is_level_one():
    assert compute_level(0) == LevelState(level=1, xp=0, next_level_xp=100)


def test_just_below_first_threshold():
    assert compute_level(99) == LevelState(level=1, xp=99, next_level_xp=100)


def test_first_level_up():
    assert compute_level(100) == LevelState(level=2, xp=0, next_level_xp=150)


def test_threshold_series_rounds_half_up():
    # 225 * 1.5 = 337.5 and 507 * 1.5 = 760.5; round() would give 338 and 760.
    series = [100]
    for _ in range(7):
        series.append(next_threshold(series[-1]))
    assert series == [100, 150, 225, 338, 507, 761, 1142, 1713]


def test_cumulative_xp_for_level():
    assert cumulative_xp_for_level(1) == 0
    assert cumulative_xp_for_level(2) == 100
    assert cumulative_xp_for_level(3) == 250
    assert cumulative_xp_for_level(4) == 475
    assert cumulative_xp_for_level(5) == 813
    assert cumulative_xp_for_level(7) == 2081


def test_boundaries_around_level_five():
    assert compute_level(812) == LevelState(level=4, xp=337, next_level_xp=338)
    assert compute_level(813) == LevelState(level=5, xp=0, next_level_xp=507)


@pytest.mark.parametrize("total", list(range(0, 3000, 7)) + [10 ** 6, 10 ** 12, 2 ** 63])
def test_round_trip_and_remainder_invariant(total):
    state = compute_level(total)
    assert cumulative_xp_for_level(state.level) + state.xp == total
    assert 0 <= state.xp < state.next_level_xp
    assert state.next_level_xp == threshold_for_level(state.level)


def test_level_is_monotonic():
    previous = compute_level(0).level
    for total in range(1, 5000):
        level = compute_level(total).level
        assert level >= previous
        previous = level


def test_huge_totals_terminate_quickly():
    # Thresholds grow geometrically, so even 10**30 XP needs only ~160 levels.
    assert compute_level(10 ** 30).level < 200


def test_integral_float_is_accepted():
    assert compute_level(150.0) == compute_level(150)


@pytest.mark.parametrize("bad", [-1, -0.5, 1.5, math.inf, -math.inf, math.nan, True, "100", None])
def test_invalid_totals_are_rejected(bad):
    with pytest.raises(InvalidAmount):
        compute_level(bad)


@pytest.mark.parametrize("bad", [0, -3, 1.0, "2"])
def test_invalid_levels_are_rejected(bad):
    with pytest.raises(InvalidAmount):
        cumulative_xp_for_level(bad)


def test_total_xp_for_backfills_from_level_and_xp():
    assert total_xp_for(1, 0) == 0
    assert total_xp_for(3, 40) == 290
    assert compute_level(total_xp_for(6, 12)) == LevelState(level=6, xp=12, next_level_xp=761)


def test_total_xp_for_rejects_xp_past_threshold():
    with pytest.raises(InvalidAmount):
        total_xp_for(2, 150)


def test_apply_xp_reports_levels_gained():
    total, state, gained = apply_xp(90, 200)
    assert total == 290
    assert state == LevelState(level=3, xp=40, next_level_xp=225)
    assert gained == 2


def test_apply_xp_without_level_up():
    total, state, gained = apply_xp(10, 0)
    assert (total, gained) == (10, 0)
    assert state.level == 1


def test_apply_xp_rejects_negative_amount():
    with pytest.raises(InvalidAmount):
        apply_xp(100, -5)
