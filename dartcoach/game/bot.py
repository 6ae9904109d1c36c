"""
Dartbot throw simulator.

Produces dart outcomes that resemble a human player of a given skill level
(0-100). Everything here is a pure function of its inputs plus the random
generator; no match state is touched.

Model:
1. Pick an aim point: first step of the checkout path when one exists,
   otherwise treble 20.
2. Roll 0-100. Below skill the dart lands exactly on the aim point.
3. Otherwise apply a miss model that depends on what was aimed at.
"""
from dataclasses import dataclass
from typing import List, Optional
import logging

import numpy as np

from dartcoach.core import Throw
from dartcoach.board import sector_neighbors
from .checkout import advise_checkout, parse_target
from .rules import counted_value, is_bust

logger = logging.getLogger(__name__)

DEFAULT_TARGET = "T20"
DOUBLE_IN_TARGET = "D20"

_default_rng = np.random.default_rng()


@dataclass
class MissModel:
    """Where missed darts end up."""
    triple_single_prob: float = 0.8  # Treble miss stays in the big single
    double_single_prob: float = 0.4  # Double miss drops into the single
    double_outside_prob: float = 0.3  # Double miss leaves the board
    bull_outer_prob: float = 0.5  # Bull miss hits the outer bull
    rtc_skill_bonus: float = 10.0  # Added to skill for RTC hit chance


def clamp_skill(skill: float) -> float:
    """Clamp a skill level to 0-100."""
    return float(min(max(skill, 0.0), 100.0))


def choose_target(score_left: int, double_in_pending: bool = False) -> str:
    """
    Decide where to aim the next dart.

    Args:
        score_left: Score remaining before the dart
        double_in_pending: Player still needs a double to start scoring

    Returns:
        Target label, e.g. "T20", "D16", "BULL"
    """
    if double_in_pending:
        return DOUBLE_IN_TARGET

    path = advise_checkout(score_left)
    if path:
        return path[0]
    return DEFAULT_TARGET


def simulate_throw(
        target: str,
        skill: float,
        rng: Optional[np.random.Generator] = None,
        miss_model: Optional[MissModel] = None
) -> Throw:
    """
    Simulate one dart at a target.

    Args:
        target: Aim label ("T20", "D16", "20", "BULL", "25")
        skill: Probability in percent of hitting the aim point exactly
        rng: Random generator (module default if None)
        miss_model: Miss probabilities (defaults if None)

    Returns:
        Where the dart landed
    """
    rng = rng if rng is not None else _default_rng
    model = miss_model or MissModel()
    aim = parse_target(target)

    if rng.random() * 100 < skill:
        return aim

    if aim.score in (25, 50):
        if rng.random() < model.bull_outer_prob:
            return Throw(25, 1)
        return Throw(int(rng.integers(1, 21)), 1)

    if aim.multiplier == 3:
        if rng.random() < model.triple_single_prob:
            return Throw(aim.score, 1)
        return Throw(_pick_neighbor(aim.score, rng), 1)

    if aim.multiplier == 2:
        miss_roll = rng.random()
        if miss_roll < model.double_single_prob:
            return Throw(aim.score, 1)
        if miss_roll < model.double_single_prob + model.double_outside_prob:
            return Throw.miss()
        return Throw(_pick_neighbor(aim.score, rng), 2)

    return aim


def _pick_neighbor(number: int, rng) -> int:
    left, right = sector_neighbors(number)
    return left if rng.random() < 0.5 else right


def simulate_x01_visit(
        score_left: int,
        skill: float,
        rng: Optional[np.random.Generator] = None,
        double_out: bool = True,
        double_in: bool = False,
        start_score: Optional[int] = None,
        miss_model: Optional[MissModel] = None
) -> List[Throw]:
    """
    Simulate a full X01 visit of up to three darts.

    The aim is recomputed after every dart. The visit stops early on a
    bust or an exact finish.

    Args:
        score_left: Score before the visit
        skill: Bot skill (0-100)
        rng: Random generator
        double_out: Leg must end on a double or the bull
        double_in: Scoring starts with a double
        start_score: Leg start score (needed for double-in)
        miss_model: Miss probabilities

    Returns:
        Thrown darts in order
    """
    throws: List[Throw] = []
    remaining = score_left
    opening = start_score if start_score is not None else score_left

    for _ in range(3):
        pending_open = double_in and remaining == opening
        target = choose_target(remaining, double_in_pending=pending_open)
        throw = simulate_throw(target, skill, rng, miss_model)
        throws.append(throw)

        after = remaining - counted_value(throw, remaining, opening, double_in)
        if is_bust(after, throw, double_out) or after == 0:
            break
        remaining = after

    logger.debug(
        f"Bot visit from {score_left}: {' '.join(t.label for t in throws)}"
    )
    return throws


def simulate_rtc_visit(
        target: int,
        skill: float,
        finish_target: int = 21,
        rng: Optional[np.random.Generator] = None,
        miss_model: Optional[MissModel] = None
) -> List[bool]:
    """
    Simulate a Round-the-Clock visit.

    Every dart hits with probability (skill + bonus) percent. Three darts
    are thrown unless the final target is hit first.

    Args:
        target: Current target (1-21, 21 = bull)
        skill: Bot skill (0-100)
        finish_target: Last target of the drill
        rng: Random generator
        miss_model: Supplies the RTC skill bonus

    Returns:
        Hit/miss per dart
    """
    rng = rng if rng is not None else _default_rng
    model = miss_model or MissModel()
    hit_chance = skill + model.rtc_skill_bonus

    attempts: List[bool] = []
    for _ in range(3):
        hit = bool(rng.random() * 100 < hit_chance)
        attempts.append(hit)
        if hit:
            if target >= finish_target:
                break
            target += 1

    return attempts
