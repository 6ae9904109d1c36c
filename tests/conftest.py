"""
Shared test helpers.
"""
from typing import Iterable, List

import pytest

from dartcoach.core import MatchSettings
from dartcoach.game import ContestantSpec, EngineConfig, MatchEngine


class ScriptedRng:
    """Stand-in for numpy Generator that replays fixed draws."""

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = ()):
        self.floats: List[float] = list(floats)
        self.ints: List[int] = list(ints)

    def random(self) -> float:
        return self.floats.pop(0)

    def integers(self, low: int, high: int) -> int:
        value = self.ints.pop(0)
        assert low <= value < high
        return value


@pytest.fixture
def scripted_rng():
    return ScriptedRng


def make_engine(names=("A", "B"), bots=(), config=None, rng=None, **settings) -> MatchEngine:
    """Engine with human players (and optional (name, skill) bots)."""
    contestants = [ContestantSpec(name=name) for name in names]
    contestants += [ContestantSpec(name=name, is_bot=True, skill=skill) for name, skill in bots]
    return MatchEngine(
        MatchSettings(**settings),
        contestants,
        config=config or EngineConfig(),
        rng=rng,
    )


def set_score(engine: MatchEngine, idx: int, score: int) -> None:
    """Put a player on a given score at the start of a visit."""
    player = engine.players[idx]
    player.score_left = score
    player.start_visit()


def throw_visit(engine: MatchEngine, *darts) -> list:
    """Submit (score, multiplier) darts and return their outcomes."""
    return [engine.submit_throw(score, multiplier) for score, multiplier in darts]


MISS = (0, 0)


def play_out(engine: MatchEngine, max_commits: int = 1000) -> None:
    """Commit pending transitions until the match is decided."""
    for _ in range(max_commits):
        if engine.result is not None or not engine.commit_pending():
            return
