"""
Tests for per-match statistics.
"""
import pytest

from dartcoach.game import (
    StatsBlock,
    record_bust,
    record_rtc_attempt,
    record_x01_visit,
)
from dartcoach.game.stats import leg_darts_bucket


@pytest.mark.parametrize("total, field_name", [
    (180, "scores_180"),
    (171, "scores_140_plus"),
    (140, "scores_140_plus"),
    (125, "scores_120_plus"),
    (100, "scores_100_plus"),
    (85, "scores_80_plus"),
    (60, "scores_60_plus"),
])
def test_milestones_are_exclusive(total, field_name):
    """Each visit counts in exactly one score band."""
    stats = StatsBlock()
    record_x01_visit(stats, total, 3, is_checkout=False, leg_darts_before=0)

    bands = ["scores_60_plus", "scores_80_plus", "scores_100_plus",
             "scores_120_plus", "scores_140_plus", "scores_180"]
    for band in bands:
        assert getattr(stats, band) == (1 if band == field_name else 0)


def test_low_visit_has_no_milestone():
    """Visits under 60 only count toward totals."""
    stats = StatsBlock()
    record_x01_visit(stats, 59, 3, is_checkout=False, leg_darts_before=0)
    assert stats.total_score == 59
    assert stats.total_darts == 3
    assert stats.scores_60_plus == 0


def test_three_dart_average():
    """Average is per three darts and guarded against zero darts."""
    stats = StatsBlock()
    assert stats.three_dart_average == 0.0
    assert stats.first9_average == 0.0
    assert stats.rtc_hit_rate == 0.0

    record_x01_visit(stats, 60, 3, is_checkout=False, leg_darts_before=0)
    record_x01_visit(stats, 100, 3, is_checkout=False, leg_darts_before=3)
    assert stats.three_dart_average == pytest.approx(80.0)


def test_first_nine():
    """Only the first nine darts of a leg count toward first-9."""
    stats = StatsBlock()
    leg_darts = 0
    for total in (100, 60, 140, 26):
        record_x01_visit(stats, total, 3, is_checkout=False, leg_darts_before=leg_darts)
        leg_darts += 3

    assert stats.first9_darts == 9
    assert stats.first9_sum == 300
    assert stats.first9_average == pytest.approx(100.0)


def test_checkout_records():
    """Checkouts update high finish, ton-plus count and the leg histogram."""
    stats = StatsBlock()
    record_x01_visit(stats, 121, 3, is_checkout=True, leg_darts_before=9)
    record_x01_visit(stats, 40, 1, is_checkout=True, leg_darts_before=18)

    assert stats.legs_won == 2
    assert stats.highest_checkout == 121
    assert stats.ton_plus_finishes == 1
    assert stats.legs_won_darts[12] == 1
    assert stats.legs_won_darts[21] == 1
    assert sum(stats.legs_won_darts.values()) == 2


@pytest.mark.parametrize("darts, bucket", [
    (9, 9), (3, 9), (10, 12), (15, 15), (16, 18), (21, 21),
    (22, 29), (29, 29), (30, 30), (45, 30),
])
def test_leg_darts_bucket(darts, bucket):
    """Darts-to-win map onto the histogram bands."""
    assert leg_darts_bucket(darts) == bucket


def test_record_bust():
    """Busted darts count but score nothing."""
    stats = StatsBlock()
    record_bust(stats, 2, leg_darts_before=6)
    assert stats.total_darts == 2
    assert stats.total_score == 0
    assert stats.first9_darts == 2
    assert stats.first9_sum == 0


def test_record_rtc_attempt():
    """RTC darts are tallied per target."""
    stats = StatsBlock()
    record_rtc_attempt(stats, 1, hit=False)
    record_rtc_attempt(stats, 1, hit=True)
    record_rtc_attempt(stats, 2, hit=True)

    assert stats.rtc_darts_thrown == 3
    assert stats.rtc_targets_hit == 2
    assert stats.rtc_sector_history[1].attempts == 2
    assert stats.rtc_sector_history[1].hits == 1
    assert stats.rtc_sector_history[2].hits == 1
    assert stats.rtc_hit_rate == pytest.approx(200 / 3)
