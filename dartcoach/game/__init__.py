"""
Game module - match engine, rules, statistics, checkouts and the dartbot.
"""
from .checkout import advise_checkout, checkout_darts, parse_target
from .rules import counted_value, is_bust
from .bot import (
    MissModel,
    choose_target,
    clamp_skill,
    simulate_throw,
    simulate_x01_visit,
    simulate_rtc_visit,
)
from .visit import Visit
from .stats import (
    SectorTally,
    StatsBlock,
    record_bust,
    record_rtc_attempt,
    record_x01_visit,
)
from .player import Player
from .history import MatchSnapshot, UndoLedger
from .match import (
    ContestantSpec,
    EngineConfig,
    MatchEngine,
    MatchResult,
    PendingTransition,
    ThrowOutcome,
    TransitionKind,
)
from .config_loader import (
    GameConfig,
    build_game_config,
    build_match_settings,
    load_game_config,
    load_game_settings,
)

__all__ = [
    "advise_checkout",
    "checkout_darts",
    "parse_target",
    "counted_value",
    "is_bust",
    "MissModel",
    "choose_target",
    "clamp_skill",
    "simulate_throw",
    "simulate_x01_visit",
    "simulate_rtc_visit",
    "Visit",
    "SectorTally",
    "StatsBlock",
    "record_bust",
    "record_rtc_attempt",
    "record_x01_visit",
    "Player",
    "MatchSnapshot",
    "UndoLedger",
    "ContestantSpec",
    "EngineConfig",
    "MatchEngine",
    "MatchResult",
    "PendingTransition",
    "ThrowOutcome",
    "TransitionKind",
    "GameConfig",
    "build_game_config",
    "build_match_settings",
    "load_game_config",
    "load_game_settings",
]
