"""
Tests for undo.
"""
import copy

import numpy as np

from dartcoach.game import EngineConfig, MatchSnapshot, UndoLedger
from dartcoach.game.player import Player

from conftest import MISS, make_engine, set_score, throw_visit


def _snapshot(score: int) -> MatchSnapshot:
    player = Player(id=0, name="A", score_left=score)
    return MatchSnapshot.capture([player], 0, 0, 0)


def test_ledger_stack():
    """Snapshots come back newest first."""
    ledger = UndoLedger()
    assert not ledger
    assert ledger.pop() is None

    ledger.push(_snapshot(501))
    ledger.push(_snapshot(441))
    assert len(ledger) == 2
    assert ledger.pop().players[0].score_left == 441
    assert ledger.pop().players[0].score_left == 501
    assert ledger.pop() is None


def test_ledger_clear():
    ledger = UndoLedger()
    ledger.push(_snapshot(501))
    ledger.clear()
    assert len(ledger) == 0


def test_snapshot_isolation():
    """Snapshots are unaffected by later changes, and hand out copies."""
    player = Player(id=0, name="A", score_left=501)
    snapshot = MatchSnapshot.capture([player], 0, 0, 0)
    player.score_left = 100

    restored = snapshot.restore_players()
    assert restored[0].score_left == 501

    restored[0].score_left = 7
    assert snapshot.restore_players()[0].score_left == 501


def test_undo_single_dart():
    """Undo removes the last dart."""
    engine = make_engine()
    engine.submit_throw(20, 3)
    engine.submit_throw(19, 3)

    assert engine.undo()
    player = engine.players[0]
    assert player.score_left == 441
    assert player.current_visit.labels() == ["T20"]
    assert engine.undo_depth == 1


def test_undo_restores_exact_state():
    """Undo then redo of the same dart gives the same position."""
    engine = make_engine()
    engine.submit_throw(20, 3)
    before = copy.deepcopy(engine.players)

    engine.submit_throw(19, 1)
    engine.undo()
    assert engine.players == before

    engine.submit_throw(19, 1)
    assert engine.players[0].score_left == 422


def test_undo_across_visit_close():
    """Undo of a visit's last dart gives the turn back."""
    engine = make_engine()
    throw_visit(engine, (20, 1), (20, 1), (20, 1))
    assert engine.current_player_index == 1

    assert engine.undo()
    player = engine.players[0]
    assert engine.current_player_index == 0
    assert player.score_left == 461
    assert player.current_visit.darts == 2
    assert player.stats.total_darts == 0


def test_undo_bust():
    """Undo of a bust restores the darts before it."""
    engine = make_engine()
    set_score(engine, 0, 32)
    engine.submit_throw(16, 1)
    engine.submit_throw(20, 1)
    assert engine.current_player_index == 1

    assert engine.undo()
    player = engine.players[0]
    assert engine.current_player_index == 0
    assert player.score_left == 16
    assert player.current_visit.labels() == ["16"]
    assert player.leg_darts_thrown == 0


def test_undo_leg_win():
    """Undo of a leg-winning dart reopens the leg."""
    engine = make_engine(names=("A", "B", "C"))
    set_score(engine, 0, 40)
    engine.submit_throw(20, 2)
    assert engine.leg_starter_index == 1

    assert engine.undo()
    assert engine.leg_starter_index == 0
    assert engine.current_player_index == 0
    assert engine.players[0].legs_won == 0
    assert engine.players[0].score_left == 40
    assert engine.players[0].stats.legs_won == 0


def test_undo_rtc():
    """RTC attempts are undone like X01 darts."""
    engine = make_engine(mode="rtc")
    engine.submit_attempt(True)

    assert engine.undo()
    player = engine.players[0]
    assert player.rtc_target == 1
    assert player.stats.rtc_darts_thrown == 0
    assert player.stats.rtc_sector_history == {}


def test_undo_noop_cases():
    """Undo refuses with an empty ledger, while busy and after the match."""
    engine = make_engine(target_to_win=1)
    assert not engine.can_undo
    assert not engine.undo()

    busy = make_engine(config=EngineConfig(auto_commit=False))
    throw_visit(busy, MISS, MISS, MISS)
    assert busy.undo_depth == 3
    assert not busy.can_undo
    assert not busy.undo()

    set_score(engine, 0, 40)
    engine.submit_throw(20, 2)
    assert engine.undo_depth == 1
    assert not engine.can_undo
    assert not engine.undo()


def test_undo_skips_bot_turn():
    """Undo after a bot's visit goes back to the human's last dart."""
    engine = make_engine(names=("A",), bots=(("Bot", 100),), rng=np.random.default_rng(0))
    throw_visit(engine, MISS, MISS, MISS)
    assert engine.players[1].score_left == 321

    assert engine.undo()
    assert engine.current_player_index == 0
    assert engine.players[0].current_visit.darts == 2
    assert engine.players[1].score_left == 501


def test_reset_clears_ledger():
    engine = make_engine()
    engine.submit_throw(20, 1)
    engine.reset()
    assert engine.undo_depth == 0
    assert not engine.undo()
