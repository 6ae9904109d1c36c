"""
Player data structure.
"""
from dataclasses import dataclass, field
from typing import Optional

from .stats import StatsBlock
from .visit import Visit


@dataclass
class Player:
    """Represents a contestant in a match."""
    id: int
    name: str
    is_bot: bool = False
    skill: float = 0.0  # Bots only, 0-100
    profile_id: Optional[str] = None

    # X01
    score_left: int = 501
    leg_darts_thrown: int = 0

    # Round the Clock
    rtc_target: int = 1  # 21 = bull
    rtc_finished: bool = False

    # Match progress
    legs_won: int = 0
    sets_won: int = 0

    # Turn tracking
    current_visit: Visit = field(default_factory=Visit)
    last_visit: Optional[Visit] = None

    stats: StatsBlock = field(default_factory=StatsBlock)

    def start_visit(self) -> None:
        """Open a fresh visit at the current score."""
        self.current_visit = Visit(start_score=self.score_left)

    def close_visit(self) -> Visit:
        """
        Close the current visit and keep it for display.

        Returns:
            The closed visit
        """
        closed = self.current_visit
        self.last_visit = closed
        self.start_visit()
        return closed

    def reset_leg(self, start_score: int) -> None:
        """Reset per-leg state for a new leg."""
        self.score_left = start_score
        self.leg_darts_thrown = 0
        self.last_visit = None
        self.start_visit()

    @property
    def average(self) -> float:
        """Three-dart average for the match."""
        return self.stats.three_dart_average
