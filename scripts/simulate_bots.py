"""
Dartbot calibration report.

Plays solo matches for a range of bot skill levels and reports the
resulting averages, darts per leg and checkout rates.

Usage:
    python scripts/simulate_bots.py
    python scripts/simulate_bots.py --legs 200 --skills 20 40 60 80 --seed 7
    python scripts/simulate_bots.py --mode rtc
"""
import sys
import argparse
from pathlib import Path
from typing import Dict, List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

from dartcoach.core import GameMode, MatchSettings, MatchUnit
from dartcoach.game import ContestantSpec, EngineConfig, MatchEngine, MissModel
import numpy as np
import logging

logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

# Safety net for very weak bots that rarely find a double
MAX_TRANSITIONS = 200_000


def simulate_skill(
        skill: float,
        legs: int,
        mode: GameMode,
        rng: np.random.Generator,
        miss_model: Optional[MissModel] = None
) -> Optional[Dict[str, float]]:
    """
    Play one solo match for a bot.

    Returns:
        Summary metrics, or None if the match did not finish
    """
    settings = MatchSettings(
        mode=mode,
        match_unit=MatchUnit.LEGS,
        target_to_win=legs,
    )
    engine = MatchEngine(
        settings,
        [ContestantSpec(name=f"Bot {skill:.0f}", is_bot=True, skill=skill)],
        config=EngineConfig(auto_commit=False),
        miss_model=miss_model,
        rng=rng,
    )

    transitions = 0
    while engine.result is None and transitions < MAX_TRANSITIONS:
        engine.commit_pending()
        transitions += 1

    if engine.result is None:
        logger.warning(f"Skill {skill}: match did not finish")
        return None

    stats = engine.result.winner.stats
    if mode == GameMode.RTC:
        return {
            "skill": skill,
            "darts": stats.rtc_darts_thrown,
            "hit_rate": stats.rtc_hit_rate,
        }

    buckets = np.array([stats.legs_won_darts[b] for b in sorted(stats.legs_won_darts)])
    bucket_bounds = np.array(sorted(stats.legs_won_darts))
    return {
        "skill": skill,
        "average": stats.three_dart_average,
        "first9": stats.first9_average,
        "darts_per_leg": stats.total_darts / legs,
        "typical_leg": float(bucket_bounds[np.argmax(buckets)]),
        "ton_plus": stats.scores_100_plus + stats.scores_120_plus
        + stats.scores_140_plus + stats.scores_180,
    }


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Dartbot calibration report")
    parser.add_argument(
        "--skills",
        type=float,
        nargs="+",
        default=[20, 35, 50, 65, 80, 95],
        help="Skill levels to simulate"
    )
    parser.add_argument(
        "--legs",
        type=int,
        default=100,
        help="Legs (or RTC rounds) per skill level"
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=GameMode.X01.value,
        help="Game mode"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed"
    )
    return parser.parse_args()


def main():
    """Run the skill sweep."""
    args = parse_args()
    mode = GameMode(args.mode)
    rng = np.random.default_rng(args.seed)

    results: List[Dict[str, float]] = []
    for skill in args.skills:
        if mode == GameMode.RTC:
            runs = [simulate_skill(skill, 1, mode, rng) for _ in range(args.legs)]
            runs = [r for r in runs if r]
            if not runs:
                continue
            darts = np.array([r["darts"] for r in runs])
            hit_rates = np.array([r["hit_rate"] for r in runs])
            results.append({
                "skill": skill,
                "darts": float(darts.mean()),
                "darts_std": float(darts.std()),
                "hit_rate": float(hit_rates.mean()),
            })
        else:
            result = simulate_skill(skill, args.legs, mode, rng)
            if result:
                results.append(result)

    print("\n" + "=" * 70)
    print(f"Dartbot Report ({mode.value}, {args.legs} per skill)")
    print("=" * 70)

    if mode == GameMode.RTC:
        print(f"{'Skill':<8} {'Darts':<10} {'Std':<8} {'Hit %':<8}")
        print("-" * 70)
        for r in results:
            print(
                f"{r['skill']:<8.0f} {r['darts']:<10.1f} "
                f"{r['darts_std']:<8.1f} {r['hit_rate']:<8.1f}"
            )
    else:
        print(f"{'Skill':<8} {'Avg':<8} {'First9':<8} {'Darts/Leg':<11} {'Typical':<9} {'100+':<6}")
        print("-" * 70)
        for r in results:
            print(
                f"{r['skill']:<8.0f} {r['average']:<8.1f} {r['first9']:<8.1f} "
                f"{r['darts_per_leg']:<11.1f} {r['typical_leg']:<9.0f} {r['ton_plus']:<6}"
            )

    print("=" * 70)


if __name__ == "__main__":
    main()
