"""
Utilities to load match and engine configuration from YAML files.

Match defaults, presentation delays and the bot miss model live in
`config/default_config.yaml` so they can be tuned without touching code.
Unknown keys are ignored to keep the loader backwards compatible.
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import numpy as np

from dartcoach.core import MatchSettings, read_yaml
from .bot import MissModel, clamp_skill
from .match import EngineConfig

logger = logging.getLogger(__name__)

# Default location for the application-wide settings
DEFAULT_CONFIG_PATH = Path("config/default_config.yaml")

DEFAULT_BOT_SKILL = 50.0


@dataclass
class GameConfig:
    """Everything needed to set up a match."""
    match: MatchSettings = field(default_factory=MatchSettings)
    engine: EngineConfig = field(default_factory=EngineConfig)
    miss_model: MissModel = field(default_factory=MissModel)
    bot_skill: float = DEFAULT_BOT_SKILL
    seed: Optional[int] = None

    def make_rng(self) -> np.random.Generator:
        """Random generator for bots (seeded when configured)."""
        return np.random.default_rng(self.seed)


def _apply_overrides(target: Any, overrides: Dict[str, Any]) -> None:
    """
    Apply dictionary overrides to a dataclass-like object.

    Unknown keys are ignored to remain forward compatible with new YAML fields.
    """
    for key, value in overrides.items():
        if hasattr(target, key):
            setattr(target, key, value)
        else:
            logger.debug("Ignoring unknown config key: %s", key)


def load_game_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load raw configuration dictionary from YAML.

    Args:
        config_path: Optional path to YAML file (defaults to DEFAULT_CONFIG_PATH)

    Returns:
        Dictionary with configuration values (empty dict on failure)
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.info("Game config not found at %s, using defaults", path)
        return {}

    try:
        return read_yaml(path)
    except Exception as exc:  # YAML/IO errors fall back to safe defaults
        logger.warning("Failed to load game config from %s: %s", path, exc)
        return {}


def build_match_settings(overrides: Optional[Dict[str, Any]] = None) -> MatchSettings:
    """
    Construct MatchSettings from the `match` section.

    Raises:
        ValueError: If a value is out of range
    """
    overrides = overrides or {}
    known = {f.name for f in fields(MatchSettings)}

    values = {}
    for key, value in overrides.items():
        if key in known:
            values[key] = value
        else:
            logger.debug("Ignoring unknown config key: %s", key)

    return MatchSettings(**values)


def build_game_config(settings: Optional[Dict[str, Any]] = None) -> GameConfig:
    """
    Construct GameConfig (match, engine and bot settings) from settings.

    Args:
        settings: Raw settings dictionary (e.g., from load_game_settings)

    Returns:
        Populated GameConfig instance
    """
    settings = settings or {}
    match_overrides = settings.get("match") or {}
    engine_overrides = settings.get("engine") or {}
    bot_overrides = dict(settings.get("bot") or {})

    config = GameConfig(match=build_match_settings(match_overrides))

    if "skill" in bot_overrides:
        config.bot_skill = clamp_skill(bot_overrides.pop("skill"))
    if "seed" in bot_overrides:
        config.seed = bot_overrides.pop("seed")

    _apply_overrides(config.engine, engine_overrides)
    _apply_overrides(config.miss_model, bot_overrides)

    return config


def load_game_config(config_path: Optional[Path] = None) -> GameConfig:
    """
    Convenience wrapper to load and build a game config in one call.
    """
    settings = load_game_settings(config_path)
    return build_game_config(settings)
