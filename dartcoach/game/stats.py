"""
Per-match player statistics.

StatsBlock holds the running totals; the record_* functions are the only
code that mutates it and are called once per closed visit (X01) or once
per dart (RTC).
"""
from dataclasses import dataclass, field
from typing import Dict

# Darts-to-win buckets: key is the upper bound of the band (30 = 30+)
LEG_DART_BUCKETS = (9, 12, 15, 18, 21, 29, 30)

# Visit score bands, highest first
MILESTONES = (
    (180, "scores_180"),
    (140, "scores_140_plus"),
    (120, "scores_120_plus"),
    (100, "scores_100_plus"),
    (80, "scores_80_plus"),
    (60, "scores_60_plus"),
)

FIRST_NINE = 9


@dataclass
class SectorTally:
    """RTC attempts and hits on one target."""
    attempts: int = 0
    hits: int = 0


def _empty_leg_buckets() -> Dict[int, int]:
    return {bucket: 0 for bucket in LEG_DART_BUCKETS}


@dataclass
class StatsBlock:
    """Running statistics for one player in one match."""
    # X01
    total_score: int = 0
    total_darts: int = 0
    highest_checkout: int = 0
    scores_60_plus: int = 0
    scores_80_plus: int = 0
    scores_100_plus: int = 0
    scores_120_plus: int = 0
    scores_140_plus: int = 0
    scores_180: int = 0
    ton_plus_finishes: int = 0  # Checkouts of 100 or more
    legs_won: int = 0
    first9_sum: int = 0
    first9_darts: int = 0
    legs_won_darts: Dict[int, int] = field(default_factory=_empty_leg_buckets)

    # Round the Clock
    rtc_darts_thrown: int = 0
    rtc_targets_hit: int = 0
    rtc_sector_history: Dict[int, SectorTally] = field(default_factory=dict)

    @property
    def three_dart_average(self) -> float:
        if self.total_darts == 0:
            return 0.0
        return self.total_score / self.total_darts * 3

    @property
    def first9_average(self) -> float:
        if self.first9_darts == 0:
            return 0.0
        return self.first9_sum / self.first9_darts * 3

    @property
    def rtc_hit_rate(self) -> float:
        """Hit percentage over all RTC darts."""
        if self.rtc_darts_thrown == 0:
            return 0.0
        return self.rtc_targets_hit / self.rtc_darts_thrown * 100


def leg_darts_bucket(darts: int) -> int:
    """Map a darts-to-win count onto its histogram bucket."""
    for bucket in LEG_DART_BUCKETS[:-1]:
        if darts <= bucket:
            return bucket
    return LEG_DART_BUCKETS[-1]


def _record_first_nine(stats: StatsBlock, visit_total: int, darts: int, leg_darts_before: int) -> None:
    if leg_darts_before >= FIRST_NINE:
        return
    stats.first9_darts += min(darts, FIRST_NINE - leg_darts_before)
    stats.first9_sum += visit_total


def record_x01_visit(
        stats: StatsBlock,
        visit_total: int,
        darts: int,
        is_checkout: bool,
        leg_darts_before: int
) -> None:
    """
    Account for a scoring X01 visit.

    Args:
        stats: Block to update
        visit_total: Points scored in the visit
        darts: Darts thrown in the visit
        is_checkout: Visit won the leg
        leg_darts_before: Darts thrown in this leg before the visit
    """
    stats.total_score += visit_total
    stats.total_darts += darts

    for threshold, name in MILESTONES:
        if visit_total >= threshold:
            setattr(stats, name, getattr(stats, name) + 1)
            break

    _record_first_nine(stats, visit_total, darts, leg_darts_before)

    if is_checkout:
        stats.legs_won += 1
        stats.highest_checkout = max(stats.highest_checkout, visit_total)
        if visit_total >= 100:
            stats.ton_plus_finishes += 1
        bucket = leg_darts_bucket(leg_darts_before + darts)
        stats.legs_won_darts[bucket] += 1


def record_bust(stats: StatsBlock, darts: int, leg_darts_before: int) -> None:
    """Account for the darts of a busted visit (no points)."""
    stats.total_darts += darts
    _record_first_nine(stats, 0, darts, leg_darts_before)


def record_rtc_attempt(stats: StatsBlock, target: int, hit: bool) -> None:
    """Account for one Round-the-Clock dart at a target."""
    tally = stats.rtc_sector_history.setdefault(target, SectorTally())
    tally.attempts += 1
    stats.rtc_darts_thrown += 1

    if hit:
        tally.hits += 1
        stats.rtc_targets_hit += 1
