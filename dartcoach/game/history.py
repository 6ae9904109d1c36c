"""
Undo ledger.

Each human action pushes a snapshot of the match before it mutates
anything; undo pops the most recent snapshot and restores it.
"""
import copy
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from .player import Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchSnapshot:
    """Restorable match position."""
    players: Tuple[Player, ...]
    current_player_index: int
    leg_starter_index: int
    set_starter_index: int

    @classmethod
    def capture(
            cls,
            players: List[Player],
            current_player_index: int,
            leg_starter_index: int,
            set_starter_index: int
    ) -> "MatchSnapshot":
        """Take an isolated copy of the live position."""
        return cls(
            players=tuple(copy.deepcopy(players)),
            current_player_index=current_player_index,
            leg_starter_index=leg_starter_index,
            set_starter_index=set_starter_index,
        )

    def restore_players(self) -> List[Player]:
        """Fresh player objects; the snapshot itself is never handed out."""
        return copy.deepcopy(list(self.players))


class UndoLedger:
    """Stack of match snapshots."""

    def __init__(self):
        self._stack: List[MatchSnapshot] = []

    def push(self, snapshot: MatchSnapshot) -> None:
        self._stack.append(snapshot)
        logger.debug(f"Snapshot pushed (depth {len(self._stack)})")

    def pop(self) -> Optional[MatchSnapshot]:
        """
        Remove the most recent snapshot.

        Returns:
            The snapshot, or None if the ledger is empty
        """
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)
