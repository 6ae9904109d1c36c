"""
Core data types for the darts engine.
Defines contracts between modules to ensure stable interfaces.
"""
from dataclasses import dataclass
from enum import Enum

VALID_SCORES = frozenset(list(range(0, 21)) + [25, 50])


class GameMode(Enum):
    """Supported rule sets."""
    X01 = "x01"  # Countdown from start score
    RTC = "rtc"  # Round-the-Clock drill


class MatchUnit(Enum):
    """What the target count of a match is expressed in."""
    LEGS = "legs"
    SETS = "sets"


@dataclass(frozen=True)
class Throw:
    """
    A single dart.

    score is the board number (1-20), 25 for the outer bull, 50 for the
    inner bull or 0 for a miss. multiplier is 0 (miss), 1, 2 or 3. A score
    of 50 is always the inner bull and is stored with multiplier 1,
    whatever multiplier was given.
    """
    score: int
    multiplier: int = 1

    def __post_init__(self):
        if self.score == 50:
            object.__setattr__(self, "multiplier", 1)

        if self.score not in VALID_SCORES:
            raise ValueError(f"Invalid score: {self.score}")
        if self.multiplier not in (0, 1, 2, 3):
            raise ValueError(f"Invalid multiplier: {self.multiplier}")
        if (self.score == 0) != (self.multiplier == 0):
            raise ValueError("A miss must have score 0 and multiplier 0")
        if self.multiplier == 3 and not 1 <= self.score <= 20:
            raise ValueError(f"No treble for {self.score}")

    @classmethod
    def miss(cls) -> "Throw":
        return cls(0, 0)

    @property
    def value(self) -> int:
        return self.score * self.multiplier

    @property
    def is_miss(self) -> bool:
        return self.multiplier == 0

    @property
    def is_finishing_double(self) -> bool:
        """Any double, or the 50-value bullseye."""
        return self.multiplier == 2 or self.score == 50

    @property
    def label(self) -> str:
        """Board notation, e.g. T20, D16, 5, 25, BULL."""
        if self.is_miss:
            return "MISS"
        if self.value == 50:
            return "BULL"
        if self.multiplier == 3:
            return f"T{self.score}"
        if self.multiplier == 2:
            return f"D{self.score}"
        return str(self.score)


@dataclass(frozen=True)
class MatchSettings:
    """
    Match configuration. Immutable for the duration of a match.
    """
    mode: GameMode = GameMode.X01
    start_score: int = 501  # 301 / 501 / 701
    double_in: bool = False
    double_out: bool = True
    match_unit: MatchUnit = MatchUnit.LEGS
    target_to_win: int = 3  # Legs or sets needed, see match_unit
    legs_per_set: int = 3
    rtc_include_bull: bool = True

    def __post_init__(self):
        # YAML gives plain strings
        if not isinstance(self.mode, GameMode):
            object.__setattr__(self, "mode", GameMode(self.mode))
        if not isinstance(self.match_unit, MatchUnit):
            object.__setattr__(self, "match_unit", MatchUnit(self.match_unit))

        if self.start_score <= 1:
            raise ValueError("start_score must be greater than 1")
        if self.target_to_win < 1:
            raise ValueError("target_to_win must be at least 1")
        if self.legs_per_set < 1:
            raise ValueError("legs_per_set must be at least 1")

    @property
    def rtc_finish_target(self) -> int:
        """Last RTC target; 21 stands for the bullseye."""
        return 21 if self.rtc_include_bull else 20

    @property
    def name(self) -> str:
        if self.mode == GameMode.RTC:
            return "Round the Clock" + (" + Bull" if self.rtc_include_bull else "")

        suffix = ""
        if self.double_in:
            suffix += " (Double In)"
        if self.double_out:
            suffix += " (Double Out)"
        return f"{self.start_score}{suffix}"
