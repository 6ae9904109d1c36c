"""
Terminal darts scorer with optional dartbot.

Enter darts as board labels (T20, D16, 5, 25, BULL, 0) in X01, or
h / m (hit / miss) in Round the Clock. "u" undoes the last dart,
"q" abandons the match.

Usage:
    python scripts/play_cli.py Alice Bob
    python scripts/play_cli.py Alice --bot 65 --start-score 301
    python scripts/play_cli.py Alice --mode rtc --no-bull
    python scripts/play_cli.py --profile 3f2a9c1b7d4e --profiles config/profiles.yaml
"""
import sys
import argparse
import time
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dartcoach.core import GameMode, MatchUnit
from dartcoach.game import (
    ContestantSpec,
    MatchEngine,
    ThrowOutcome,
    load_game_config,
    parse_target,
)
from dartcoach.profiles import ProfileStore
import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

OUTCOME_MESSAGES = {
    ThrowOutcome.BUST: "BUST!",
    ThrowOutcome.LEG_WON: "LEG WON!",
    ThrowOutcome.SET_WON: "SET WON!",
    ThrowOutcome.MATCH_WON: "GAME SHOT AND THE MATCH!",
    ThrowOutcome.RTC_FINISHED: "AROUND THE CLOCK!",
}


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Darts scorer for X01 and Round the Clock"
    )

    parser.add_argument(
        "players",
        nargs="*",
        help="Guest player names"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_config.yaml",
        help="Game configuration file"
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=None,
        help="Game mode"
    )
    parser.add_argument(
        "--start-score",
        type=int,
        choices=[301, 501, 701],
        default=None,
        help="X01 start score"
    )

    target_group = parser.add_mutually_exclusive_group()
    target_group.add_argument(
        "--legs",
        type=int,
        default=None,
        help="Legs needed to win"
    )
    target_group.add_argument(
        "--sets",
        type=int,
        default=None,
        help="Sets needed to win"
    )

    parser.add_argument(
        "--double-in",
        action="store_true",
        help="Require a double to start scoring"
    )
    parser.add_argument(
        "--no-double-out",
        action="store_true",
        help="Any dart may finish a leg"
    )
    parser.add_argument(
        "--no-bull",
        action="store_true",
        help="Round the Clock ends on 20"
    )
    parser.add_argument(
        "--bot",
        type=float,
        nargs="?",
        const=-1.0,
        default=None,
        help="Add a dartbot (optional skill 0-100)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the dartbot"
    )
    parser.add_argument(
        "--profiles",
        type=str,
        default=None,
        help="Saved profiles file"
    )
    parser.add_argument(
        "--profile",
        action="append",
        default=[],
        help="Saved profile id to play as (repeatable)"
    )

    return parser.parse_args()


def print_board(engine: MatchEngine) -> None:
    """Print scores and whose turn it is."""
    settings = engine.settings
    print("-" * 60)
    for idx, player in enumerate(engine.players):
        marker = ">" if idx == engine.current_player_index else " "
        if settings.mode == GameMode.X01:
            progress = f"{player.score_left:>4}  avg {player.average:5.1f}"
        else:
            target = "BULL" if player.rtc_target > 20 else player.rtc_target
            progress = "done" if player.rtc_finished else f"-> {target}"
        legs = f"L{player.legs_won}"
        if settings.match_unit == MatchUnit.SETS:
            legs = f"S{player.sets_won} " + legs
        darts = " ".join(player.current_visit.labels())
        print(f"{marker} {player.name:<14} {progress:<18} {legs:<8} {darts}")

    hint = engine.checkout_hint()
    if hint and not engine.current_player.is_bot:
        print(f"  Checkout: {' '.join(hint)}")


def wait_for_transitions(engine: MatchEngine) -> None:
    """Let pending transitions play out at their presentation pace."""
    while engine.pending is not None:
        remaining = engine.pending.due_at - time.monotonic()
        if remaining > 0:
            time.sleep(remaining)
        kind = engine.pending.kind.value
        engine.tick()
        if kind == "bot_turn":
            bot = engine.players[engine.current_player_index]
            visit = bot.current_visit if not bot.current_visit.is_empty else bot.last_visit
            if bot.is_bot and visit is not None:
                print(f"  {bot.name}: {' '.join(visit.labels())}")


def read_input(engine: MatchEngine) -> ThrowOutcome:
    """Read one dart for the current player."""
    player = engine.current_player
    raw = input(f"{player.name}> ").strip().lower()

    if raw == "q":
        raise KeyboardInterrupt
    if raw == "u":
        if not engine.undo():
            print("  Nothing to undo")
        return ThrowOutcome.IGNORED

    if engine.settings.mode == GameMode.RTC:
        if raw not in ("h", "m", "y", "n"):
            print("  Enter h (hit) or m (miss)")
            return ThrowOutcome.IGNORED
        return engine.submit_attempt(raw in ("h", "y"))

    try:
        throw = parse_target(raw)
    except ValueError:
        print("  Enter a target like T20, D16, 5, 25, BULL or 0")
        return ThrowOutcome.IGNORED
    return engine.submit_throw(throw.score, throw.multiplier)


def build_contestants(
        args,
        store: Optional[ProfileStore],
        bot_skill: float
) -> List[ContestantSpec]:
    """Saved profiles first, then guests, then the bot."""
    contestants = []
    for profile_id in args.profile:
        profile = store.get(profile_id) if store else None
        if profile is None:
            logger.error(f"Unknown profile: {profile_id}")
            continue
        contestants.append(ContestantSpec(name=profile.name, profile_id=profile.id))

    contestants.extend(ContestantSpec(name=name) for name in args.players)

    if args.bot is not None:
        skill = bot_skill if args.bot < 0 else args.bot
        contestants.append(ContestantSpec(name="Dartbot", is_bot=True, skill=skill))

    return contestants


def main():
    """Run an interactive match."""
    args = parse_args()

    game_config = load_game_config(Path(args.config))
    match = game_config.match

    overrides = {}
    if args.mode:
        overrides["mode"] = GameMode(args.mode)
    if args.start_score:
        overrides["start_score"] = args.start_score
    if args.legs:
        overrides.update(match_unit=MatchUnit.LEGS, target_to_win=args.legs)
    if args.sets:
        overrides.update(match_unit=MatchUnit.SETS, target_to_win=args.sets)
    if args.double_in:
        overrides["double_in"] = True
    if args.no_double_out:
        overrides["double_out"] = False
    if args.no_bull:
        overrides["rtc_include_bull"] = False
    match = replace(match, **overrides)

    if args.seed is not None:
        game_config.seed = args.seed

    store = ProfileStore(Path(args.profiles)) if args.profiles else None
    contestants = build_contestants(args, store, game_config.bot_skill)

    if not contestants:
        logger.error("No players given")
        return

    game_config.engine.auto_commit = False
    engine = MatchEngine(
        match,
        contestants,
        config=game_config.engine,
        miss_model=game_config.miss_model,
        rng=game_config.make_rng(),
    )

    print(f"\n{match.name} - u = undo, q = quit")

    try:
        while engine.result is None:
            wait_for_transitions(engine)
            if engine.result is not None:
                break
            print_board(engine)
            outcome = read_input(engine)
            if outcome in OUTCOME_MESSAGES:
                print(f"  {OUTCOME_MESSAGES[outcome]}")
    except (KeyboardInterrupt, EOFError):
        print("\nMatch abandoned")
        return

    result = engine.result
    print("=" * 60)
    print(f"Winner: {result.winner.name}")
    if len(result.tied) > 1:
        print(f"Tied on darts: {', '.join(result.tied)}")
    for player in result.players:
        if result.mode == GameMode.X01:
            print(
                f"  {player.name:<14} avg {player.stats.three_dart_average:6.2f}  "
                f"high out {player.stats.highest_checkout}"
            )
        else:
            print(
                f"  {player.name:<14} {player.stats.rtc_darts_thrown} darts  "
                f"{player.stats.rtc_hit_rate:5.1f}% hits"
            )

    if store:
        store.apply_match(result)


if __name__ == "__main__":
    main()
