"""
Visit accumulator - the up-to-three darts of one turn.
"""
from dataclasses import dataclass, field
from typing import List

from dartcoach.core import Throw

DARTS_PER_VISIT = 3


@dataclass
class Visit:
    """Darts thrown in one player's turn."""
    start_score: int = 0  # score_left when the visit began
    throws: List[Throw] = field(default_factory=list)
    values: List[int] = field(default_factory=list)  # Points each dart counted

    def add(self, throw: Throw, counted: int) -> None:
        """
        Add a dart to the visit.

        Args:
            throw: The dart
            counted: Points it takes off the score (0 before double-in)

        Raises:
            ValueError: If the visit already holds three darts
        """
        if self.is_full:
            raise ValueError("Visit already has three darts")
        self.throws.append(throw)
        self.values.append(counted)

    @property
    def darts(self) -> int:
        return len(self.throws)

    @property
    def total(self) -> int:
        return sum(self.values)

    @property
    def is_full(self) -> bool:
        return len(self.throws) >= DARTS_PER_VISIT

    @property
    def is_empty(self) -> bool:
        return not self.throws

    def labels(self) -> List[str]:
        return [t.label for t in self.throws]
