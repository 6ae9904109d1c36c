"""
Tests for the dartbot throw simulator.
"""
import numpy as np
import pytest

from dartcoach.core import Throw
from dartcoach.game import (
    MissModel,
    choose_target,
    clamp_skill,
    simulate_rtc_visit,
    simulate_throw,
    simulate_x01_visit,
)


@pytest.mark.parametrize("score_left, expected", [
    (501, "T20"),
    (171, "T20"),
    (169, "T20"),  # No checkout, keep scoring
    (170, "T20"),
    (100, "T20"),
    (50, "BULL"),
    (40, "D20"),
    (32, "D16"),
])
def test_choose_target(score_left, expected):
    """Aim at the first dart of the checkout, otherwise treble 20."""
    assert choose_target(score_left) == expected


def test_choose_target_double_in():
    """A bot that still needs to open aims at a double."""
    assert choose_target(501, double_in_pending=True) == "D20"


def test_perfect_skill_hits_aim():
    """Skill 100 always lands on the aim point."""
    rng = np.random.default_rng(1)
    for target, expected in [("T20", Throw(20, 3)), ("D16", Throw(16, 2)),
                             ("BULL", Throw(50, 1)), ("7", Throw(7, 1))]:
        for _ in range(20):
            assert simulate_throw(target, 100, rng) == expected


def test_skill_threshold(scripted_rng):
    """The roll hits exactly when below skill."""
    assert simulate_throw("T20", 60, scripted_rng([0.59])) == Throw(20, 3)
    assert simulate_throw("T20", 60, scripted_rng([0.61, 0.1])) == Throw(20, 1)


def test_treble_miss(scripted_rng):
    """Treble misses land in the single or a neighbouring single."""
    assert simulate_throw("T20", 0, scripted_rng([0.5, 0.79])) == Throw(20, 1)
    assert simulate_throw("T20", 0, scripted_rng([0.5, 0.9, 0.2])) == Throw(5, 1)
    assert simulate_throw("T20", 0, scripted_rng([0.5, 0.9, 0.7])) == Throw(1, 1)


def test_double_miss(scripted_rng):
    """Double misses: single, off the board, or a neighbouring double."""
    assert simulate_throw("D16", 0, scripted_rng([0.5, 0.1])) == Throw(16, 1)
    assert simulate_throw("D16", 0, scripted_rng([0.5, 0.5])) == Throw.miss()
    assert simulate_throw("D16", 0, scripted_rng([0.5, 0.8, 0.2])) == Throw(7, 2)
    assert simulate_throw("D16", 0, scripted_rng([0.5, 0.8, 0.9])) == Throw(8, 2)


def test_bull_miss(scripted_rng):
    """Bull misses hit the outer bull or a random single."""
    assert simulate_throw("BULL", 0, scripted_rng([0.5, 0.2])) == Throw(25, 1)
    assert simulate_throw("BULL", 0, scripted_rng([0.5, 0.9], [7])) == Throw(7, 1)


def test_single_miss(scripted_rng):
    """Missing a single still scores that single."""
    assert simulate_throw("20", 0, scripted_rng([0.99])) == Throw(20, 1)


def test_miss_model_override(scripted_rng):
    """Custom miss probabilities are honoured."""
    model = MissModel(triple_single_prob=0.0)
    throw = simulate_throw("T20", 0, scripted_rng([0.5, 0.1, 0.2]), model)
    assert throw == Throw(5, 1)


def test_x01_visit_scoring():
    """A perfect bot throws three treble 20s from 501."""
    throws = simulate_x01_visit(501, 100, np.random.default_rng(0))
    assert throws == [Throw(20, 3)] * 3


def test_x01_visit_stops_on_finish():
    """The visit ends with the checkout dart."""
    rng = np.random.default_rng(0)
    assert simulate_x01_visit(100, 100, rng) == [Throw(20, 3), Throw(20, 2)]
    assert simulate_x01_visit(170, 100, rng) == [Throw(20, 3), Throw(20, 3), Throw(50, 1)]
    assert simulate_x01_visit(40, 100, rng) == [Throw(20, 2)]


def test_x01_visit_stops_on_bust(scripted_rng):
    """Leaving 1 busts and ends the visit."""
    # Aiming D1 from 2, falls into the single 1
    throws = simulate_x01_visit(2, 0, scripted_rng([0.5, 0.1]))
    assert throws == [Throw(1, 1)]


def test_x01_visit_recomputes_aim(scripted_rng):
    """After a missed double the bot goes for the new finish."""
    # 32: D16 missed into single 16 -> 16 left -> D8 hit
    throws = simulate_x01_visit(32, 50, scripted_rng([0.9, 0.1, 0.1]))
    assert throws == [Throw(16, 1), Throw(8, 2)]


def test_x01_visit_double_in():
    """A bot that has not opened aims at a double first."""
    throws = simulate_x01_visit(
        501, 100, np.random.default_rng(0), double_in=True, start_score=501
    )
    assert throws == [Throw(20, 2), Throw(20, 3), Throw(20, 3)]


def test_rtc_visit_all_hits():
    """Skill plus bonus at 100 hits every dart."""
    rng = np.random.default_rng(0)
    assert simulate_rtc_visit(1, 90, 21, rng) == [True, True, True]


def test_rtc_visit_stops_after_finish():
    """No darts are thrown after the last target is hit."""
    rng = np.random.default_rng(0)
    assert simulate_rtc_visit(20, 90, 21, rng) == [True, True]
    assert simulate_rtc_visit(20, 90, 20, rng) == [True]


def test_rtc_visit_no_chance():
    """Zero hit chance misses all three darts."""
    rng = np.random.default_rng(0)
    assert simulate_rtc_visit(5, -10, 21, rng) == [False, False, False]


def test_rtc_hit_rate_tracks_skill():
    """Observed hit rate is close to skill + bonus."""
    rng = np.random.default_rng(42)
    attempts = []
    for _ in range(2000):
        attempts.extend(simulate_rtc_visit(1, 40, 21, rng))
    assert np.mean(attempts) == pytest.approx(0.5, abs=0.03)


def test_clamp_skill():
    """Skill is clamped to 0-100."""
    assert clamp_skill(150) == 100.0
    assert clamp_skill(-5) == 0.0
    assert clamp_skill(55) == 55.0
