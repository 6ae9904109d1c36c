"""
Match state machine.

Owns the players, the turn pointer, leg/set counters and the undo ledger.
State only changes through the entry points:

- submit_throw(score, multiplier): human X01 dart
- submit_attempt(hit): human Round-the-Clock dart
- play_bot_turn(): a full simulated visit for a bot
- undo(): step back before the last human dart

Turn flow per player:
    AwaitingThrow -> (up to 3 darts) -> VisitResolved -> NextPlayer
with BUST and LEG_WON as early exits of a visit.

Closing a visit, a bust, a leg rollover and a bot's turn are held as a
single pending transition so a UI can show the finished visit before the
turn moves on. While a transition is pending the engine is busy and
ignores input. With auto_commit the transition completes immediately;
bots play at most one round per call, so an all-bot match is advanced by
calling commit_pending() or play_bot_turn() until result is set.
"""
import copy
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from dartcoach.core import GameMode, MatchSettings, MatchUnit, Throw
from .bot import MissModel, clamp_skill, simulate_rtc_visit, simulate_x01_visit
from .checkout import advise_checkout
from .history import MatchSnapshot, UndoLedger
from .player import Player
from .rules import counted_value, is_bust
from .stats import StatsBlock, record_bust, record_rtc_attempt, record_x01_visit

logger = logging.getLogger(__name__)


class ThrowOutcome(Enum):
    """What a single input did to the match."""
    IGNORED = "ignored"  # Input refused (busy, finished, wrong player...)
    CONTINUE = "continue"  # Same player throws again
    VISIT_CLOSED = "visit_closed"  # Visit complete, turn passes
    BUST = "bust"  # Visit void, turn passes
    LEG_WON = "leg_won"
    SET_WON = "set_won"
    MATCH_WON = "match_won"
    RTC_FINISHED = "rtc_finished"  # Player hit the last RTC target


class TransitionKind(Enum):
    """Deferred state changes."""
    CLOSE_VISIT = "close_visit"
    BUST = "bust"
    LEG_ROLLOVER = "leg_rollover"
    RTC_CLOSE = "rtc_close"
    BOT_TURN = "bot_turn"


@dataclass
class EngineConfig:
    """Engine behaviour and pacing."""
    auto_commit: bool = True  # Complete transitions without waiting
    count_bust_darts: bool = True  # Busted darts count toward averages

    # Presentation delays (seconds)
    visit_close_delay: float = 0.5
    bust_delay: float = 1.0
    leg_rollover_delay: float = 2.0
    bot_turn_delay: float = 1.0
    rtc_close_delay: float = 0.5


@dataclass(frozen=True)
class PendingTransition:
    """A transition waiting for its presentation delay."""
    kind: TransitionKind
    delay: float
    due_at: float
    next_starter: Optional[int] = None  # LEG_ROLLOVER only
    set_won: bool = False  # LEG_ROLLOVER only

    def is_due(self, now: float) -> bool:
        return now >= self.due_at


@dataclass(frozen=True)
class ContestantSpec:
    """Who takes part in a match."""
    name: str
    is_bot: bool = False
    skill: float = 0.0
    profile_id: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    """Final outcome. Players are copies taken when the match was decided."""
    winner: Player
    players: Tuple[Player, ...]
    mode: GameMode
    tied: Tuple[str, ...] = ()  # Everyone sharing the winning RTC dart count


class MatchEngine:
    """
    Turn-based darts match engine for X01 and Round the Clock.

    All public methods, including the player views, are serialized behind
    one lock so the engine can be shared with a UI timer thread.
    """

    def __init__(
            self,
            settings: MatchSettings,
            contestants: Sequence[ContestantSpec],
            config: Optional[EngineConfig] = None,
            miss_model: Optional[MissModel] = None,
            rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize and start a match.

        Args:
            settings: Match rules
            contestants: Players in throwing order
            config: Engine behaviour (default: EngineConfig())
            miss_model: Bot miss probabilities
            rng: Random generator for bots (fresh generator if None)

        Raises:
            ValueError: If no contestants are given
        """
        if not contestants:
            raise ValueError("A match needs at least one contestant")

        self.settings = settings
        self.contestants = list(contestants)
        self.config = config or EngineConfig()
        self.miss_model = miss_model or MissModel()
        self.rng = rng if rng is not None else np.random.default_rng()

        self._lock = threading.RLock()
        self._ledger = UndoLedger()
        self._players: List[Player] = []
        self._current = 0
        self._leg_starter = 0
        self._set_starter = 0
        self._pending: Optional[PendingTransition] = None
        self._result: Optional[MatchResult] = None

        self.start()

    # ------------------------------------------------------------------
    # Lifecycle

    def start(self) -> None:
        """(Re)start the match with fresh players."""
        with self._lock:
            self._players = [
                self._create_player(idx, spec)
                for idx, spec in enumerate(self.contestants)
            ]
            self._current = 0
            self._leg_starter = 0
            self._set_starter = 0
            self._pending = None
            self._result = None
            self._ledger.clear()

            logger.info(
                f"Match started: {self.settings.name} with "
                f"{len(self._players)} players"
            )

            self._schedule_bot_turn()
            self._drain()

    def reset(self) -> None:
        """Abandon the current match and start over."""
        logger.info("Match reset")
        self.start()

    def _create_player(self, idx: int, spec: ContestantSpec) -> Player:
        player = Player(
            id=idx,
            name=spec.name,
            is_bot=spec.is_bot,
            skill=clamp_skill(spec.skill) if spec.is_bot else 0.0,
            profile_id=spec.profile_id,
        )
        player.reset_leg(self.settings.start_score)
        return player

    # ------------------------------------------------------------------
    # Views

    @property
    def players(self) -> List[Player]:
        """
        Players in seat order.

        The list is a copy but the Player objects are the live ones, so
        treat them as read-only; they change with the next input. Use
        result or export_stats() for data that must outlive the match.
        """
        with self._lock:
            return list(self._players)

    @property
    def current_player_index(self) -> int:
        return self._current

    @property
    def current_player(self) -> Player:
        """Live (read-only) view of the player to throw."""
        with self._lock:
            return self._players[self._current]

    @property
    def leg_starter_index(self) -> int:
        return self._leg_starter

    @property
    def set_starter_index(self) -> int:
        return self._set_starter

    @property
    def pending(self) -> Optional[PendingTransition]:
        return self._pending

    @property
    def is_busy(self) -> bool:
        return self._pending is not None

    @property
    def result(self) -> Optional[MatchResult]:
        return self._result

    @property
    def undo_depth(self) -> int:
        return len(self._ledger)

    @property
    def can_undo(self) -> bool:
        return len(self._ledger) > 0 and not self.is_busy and self._result is None

    def checkout_hint(self) -> Optional[List[str]]:
        """Suggested finish for the player to throw (X01 only)."""
        if self.settings.mode != GameMode.X01:
            return None
        return advise_checkout(self.current_player.score_left)

    def export_stats(self) -> Dict[str, StatsBlock]:
        """
        Copy the statistics of every human player.

        Returns:
            Stats keyed by profile id, or by name when no profile is
            linked. A name already taken gets the seat index appended ("Guest#1").
        """
        with self._lock:
            exported: Dict[str, StatsBlock] = {}
            for player in self._players:
                if player.is_bot:
                    continue
                key = player.profile_id or player.name
                if key in exported:
                    key = f"{key}#{player.id}"
                exported[key] = copy.deepcopy(player.stats)
            return exported

    # ------------------------------------------------------------------
    # Entry points

    def submit_throw(self, score: int, multiplier: int) -> ThrowOutcome:
        """
        Record a human X01 dart.

        Args:
            score: Board number, 25, 50, or 0 for a miss
            multiplier: 0-3

        Returns:
            Outcome of the dart (IGNORED if input is not accepted now)
        """
        with self._lock:
            if not self._accepts_human_input(GameMode.X01):
                return ThrowOutcome.IGNORED

            try:
                throw = Throw(score, multiplier)
            except ValueError as e:
                logger.debug(f"Ignoring impossible throw: {e}")
                return ThrowOutcome.IGNORED

            self._push_snapshot()
            outcome = self._apply_throw(throw)
            self._drain()
            return outcome

    def submit_attempt(self, hit: bool) -> ThrowOutcome:
        """
        Record a human Round-the-Clock dart.

        Args:
            hit: Whether the current target was hit

        Returns:
            Outcome of the dart (IGNORED if input is not accepted now)
        """
        with self._lock:
            if not self._accepts_human_input(GameMode.RTC):
                return ThrowOutcome.IGNORED
            if self.current_player.current_visit.is_full:
                return ThrowOutcome.IGNORED

            self._push_snapshot()
            outcome = self._apply_attempt(hit)
            self._drain()
            return outcome

    def play_bot_turn(self) -> ThrowOutcome:
        """
        Let the bot to move throw its whole visit now.

        Returns:
            Outcome of the bot's last dart (IGNORED if no bot is to move)
        """
        with self._lock:
            if self._result is not None or not self.current_player.is_bot:
                return ThrowOutcome.IGNORED
            if self._pending is not None and self._pending.kind != TransitionKind.BOT_TURN:
                return ThrowOutcome.IGNORED

            self._pending = None
            outcome = self._play_bot_visit()
            self._drain(bot_turns=1)
            return outcome

    def undo(self) -> bool:
        """
        Restore the position before the last human dart.

        Returns:
            True if a snapshot was restored
        """
        with self._lock:
            if self._result is not None or self._pending is not None:
                return False

            snapshot = self._ledger.pop()
            if snapshot is None:
                return False

            self._players = snapshot.restore_players()
            self._current = snapshot.current_player_index
            self._leg_starter = snapshot.leg_starter_index
            self._set_starter = snapshot.set_starter_index

            logger.info(f"Undo: {self.current_player.name} to throw")
            return True

    def commit_pending(self) -> bool:
        """
        Complete the pending transition without waiting for its delay.

        Returns:
            True if a transition was committed
        """
        with self._lock:
            if self._pending is None:
                return False
            self._commit_and_drain()
            return True

    def tick(self, now: Optional[float] = None) -> bool:
        """
        Complete the pending transition once its delay has elapsed.

        Args:
            now: time.monotonic() value (current time if None)

        Returns:
            True if a transition was committed
        """
        with self._lock:
            if self._pending is None:
                return False
            now = time.monotonic() if now is None else now
            if not self._pending.is_due(now):
                return False
            self._commit_and_drain()
            return True

    # ------------------------------------------------------------------
    # Input gating and history

    def _accepts_human_input(self, mode: GameMode) -> bool:
        if self._result is not None:
            logger.debug("Input ignored: match is finished")
            return False
        if self._pending is not None:
            logger.debug(f"Input ignored: {self._pending.kind.value} pending")
            return False
        if self.settings.mode != mode:
            logger.debug(f"Input ignored: match is not {mode.value}")
            return False
        if self.current_player.is_bot:
            logger.debug("Input ignored: bot to throw")
            return False
        return True

    def _push_snapshot(self) -> None:
        self._ledger.push(MatchSnapshot.capture(
            self._players,
            self._current,
            self._leg_starter,
            self._set_starter,
        ))

    # ------------------------------------------------------------------
    # X01

    def _apply_throw(self, throw: Throw) -> ThrowOutcome:
        player = self.current_player
        settings = self.settings

        counted = counted_value(throw, player.score_left, settings.start_score, settings.double_in)
        player.current_visit.add(throw, counted)
        remaining = player.score_left - counted

        logger.debug(f"{player.name} threw {throw.label} ({remaining} left)")

        if is_bust(remaining, throw, settings.double_out):
            player.score_left = player.current_visit.start_score
            logger.info(f"{player.name} busted, back on {player.score_left}")
            self._schedule(TransitionKind.BUST, self.config.bust_delay)
            return ThrowOutcome.BUST

        player.score_left = remaining

        if remaining == 0:
            return self._win_leg(player)

        if player.current_visit.is_full:
            self._schedule(TransitionKind.CLOSE_VISIT, self.config.visit_close_delay)
            return ThrowOutcome.VISIT_CLOSED

        return ThrowOutcome.CONTINUE

    def _win_leg(self, winner: Player) -> ThrowOutcome:
        visit = winner.current_visit
        record_x01_visit(
            winner.stats,
            visit.total,
            visit.darts,
            is_checkout=True,
            leg_darts_before=winner.leg_darts_thrown,
        )
        winner.leg_darts_thrown += visit.darts
        winner.legs_won += 1

        logger.info(
            f"{winner.name} won the leg with {visit.total} "
            f"({winner.leg_darts_thrown} darts)"
        )

        set_won = False
        if self.settings.match_unit == MatchUnit.SETS:
            if winner.legs_won >= self.settings.legs_per_set:
                set_won = True
                winner.sets_won += 1
                for player in self._players:
                    player.legs_won = 0
                logger.info(f"{winner.name} won the set ({winner.sets_won} sets)")
            match_won = winner.sets_won >= self.settings.target_to_win
        else:
            match_won = winner.legs_won >= self.settings.target_to_win

        if match_won:
            winner.close_visit()
            self._finish_match(winner)
            return ThrowOutcome.MATCH_WON

        count = len(self._players)
        if set_won:
            next_starter = (self._set_starter + 1) % count
        else:
            next_starter = (self._leg_starter + 1) % count

        self._schedule(
            TransitionKind.LEG_ROLLOVER,
            self.config.leg_rollover_delay,
            next_starter=next_starter,
            set_won=set_won,
        )
        return ThrowOutcome.SET_WON if set_won else ThrowOutcome.LEG_WON

    def _close_x01_visit(self) -> None:
        player = self.current_player
        visit = player.close_visit()
        record_x01_visit(
            player.stats,
            visit.total,
            visit.darts,
            is_checkout=False,
            leg_darts_before=player.leg_darts_thrown,
        )
        player.leg_darts_thrown += visit.darts
        self._advance_turn()

    def _close_bust(self) -> None:
        player = self.current_player
        visit = player.close_visit()
        if self.config.count_bust_darts:
            record_bust(player.stats, visit.darts, player.leg_darts_thrown)
        player.leg_darts_thrown += visit.darts
        self._advance_turn()

    def _rollover_leg(self, transition: PendingTransition) -> None:
        for player in self._players:
            player.reset_leg(self.settings.start_score)

        if transition.set_won:
            self._set_starter = transition.next_starter
        self._leg_starter = transition.next_starter
        self._current = transition.next_starter

        logger.info(f"New leg: {self.current_player.name} to throw first")

    # ------------------------------------------------------------------
    # Round the Clock

    def _apply_attempt(self, hit: bool) -> ThrowOutcome:
        player = self.current_player

        if player.rtc_finished:
            # Finished players still use their turn slot
            self._schedule(TransitionKind.RTC_CLOSE, self.config.rtc_close_delay)
            return ThrowOutcome.VISIT_CLOSED

        target = player.rtc_target
        record_rtc_attempt(player.stats, target, hit)
        player.current_visit.add(self._rtc_throw(target, hit), 0)

        if hit:
            if target >= self.settings.rtc_finish_target:
                player.rtc_finished = True
                logger.info(
                    f"{player.name} finished Round the Clock in "
                    f"{player.stats.rtc_darts_thrown} darts"
                )
                self._schedule(TransitionKind.RTC_CLOSE, self.config.rtc_close_delay)
                return ThrowOutcome.RTC_FINISHED
            player.rtc_target += 1

        if player.current_visit.is_full:
            self._schedule(TransitionKind.RTC_CLOSE, self.config.rtc_close_delay)
            return ThrowOutcome.VISIT_CLOSED

        return ThrowOutcome.CONTINUE

    @staticmethod
    def _rtc_throw(target: int, hit: bool) -> Throw:
        if not hit:
            return Throw.miss()
        if target > 20:
            return Throw(50, 1)
        return Throw(target, 1)

    def _close_rtc_visit(self) -> None:
        self.current_player.close_visit()

        # The round is only complete once the last seat has thrown
        if self._current == len(self._players) - 1:
            finishers = [p for p in self._players if p.rtc_finished]
            if finishers:
                best = min(p.stats.rtc_darts_thrown for p in finishers)
                tied = [p for p in finishers if p.stats.rtc_darts_thrown == best]
                self._finish_match(tied[0], tied=tuple(p.name for p in tied))
                return

        self._advance_turn()

    # ------------------------------------------------------------------
    # Bots

    def _play_bot_visit(self) -> ThrowOutcome:
        player = self.current_player
        outcome = ThrowOutcome.IGNORED

        if self.settings.mode == GameMode.X01:
            throws = simulate_x01_visit(
                player.score_left,
                player.skill,
                self.rng,
                double_out=self.settings.double_out,
                double_in=self.settings.double_in,
                start_score=self.settings.start_score,
                miss_model=self.miss_model,
            )
            for throw in throws:
                outcome = self._apply_throw(throw)
                if outcome != ThrowOutcome.CONTINUE:
                    break
        else:
            if player.rtc_finished:
                return self._apply_attempt(False)
            attempts = simulate_rtc_visit(
                player.rtc_target,
                player.skill,
                self.settings.rtc_finish_target,
                self.rng,
                self.miss_model,
            )
            for hit in attempts:
                outcome = self._apply_attempt(hit)
                if outcome != ThrowOutcome.CONTINUE:
                    break

        return outcome

    def _schedule_bot_turn(self) -> None:
        if self._result is None and self._pending is None and self.current_player.is_bot:
            self._schedule(TransitionKind.BOT_TURN, self.config.bot_turn_delay)

    # ------------------------------------------------------------------
    # Transitions

    def _schedule(self, kind: TransitionKind, delay: float, **payload) -> None:
        self._pending = PendingTransition(
            kind=kind,
            delay=delay,
            due_at=time.monotonic() + delay,
            **payload,
        )

    def _commit_pending(self) -> None:
        transition = self._pending
        self._pending = None

        logger.debug(f"Committing {transition.kind.value}")

        if transition.kind == TransitionKind.CLOSE_VISIT:
            self._close_x01_visit()
        elif transition.kind == TransitionKind.BUST:
            self._close_bust()
        elif transition.kind == TransitionKind.LEG_ROLLOVER:
            self._rollover_leg(transition)
        elif transition.kind == TransitionKind.RTC_CLOSE:
            self._close_rtc_visit()
        elif transition.kind == TransitionKind.BOT_TURN:
            self._play_bot_visit()

        self._schedule_bot_turn()

    def _drain(self, bot_turns: int = 0) -> None:
        """
        Run queued transitions synchronously when auto-committing.

        At most one full round of bot turns is played per call. When every
        seat is a bot, the next BOT_TURN is left pending for the host to
        commit, so a match nobody can finish never blocks the caller.

        Args:
            bot_turns: Bot visits already played in this round
        """
        while self._pending is not None and self.config.auto_commit:
            if self._pending.kind == TransitionKind.BOT_TURN:
                if bot_turns >= len(self._players):
                    logger.debug("Bot round complete, leaving next turn pending")
                    break
                bot_turns += 1
            self._commit_pending()

    def _commit_and_drain(self) -> None:
        played_bot = self._pending.kind == TransitionKind.BOT_TURN
        self._commit_pending()
        self._drain(bot_turns=1 if played_bot else 0)

    def _advance_turn(self) -> None:
        self._current = (self._current + 1) % len(self._players)

    def _finish_match(self, winner: Player, tied: Tuple[str, ...] = ()) -> None:
        players = copy.deepcopy(self._players)
        self._result = MatchResult(
            winner=players[winner.id],
            players=tuple(players),
            mode=self.settings.mode,
            tied=tied or (winner.name,),
        )
        self._pending = None
        logger.info(f"Match finished! Winner: {winner.name}")
