from __future__ import annotations

import pytest

from bitchess.engine.classifier import DrawPolicy
from bitchess.engine.errors import IllegalMoveError, InvalidPositionError
from bitchess.engine.game import Game
from bitchess.engine.state import STARTPOS_FEN
from bitchess.engine.types import TerminalStatus


SHUFFLE = ("g1f3", "g8f6", "f3g1", "f6g8")


def test_new_game_starts_in_progress() -> None:
    g = Game.new()
    assert g.to_fen() == STARTPOS_FEN
    assert g.status is TerminalStatus.IN_PROGRESS
    assert len(g.legal_moves()) == 20
    assert not g.is_over()


def test_apply_uci_and_undo_round_trip() -> None:
    g = Game.new()
    hash0 = g.state.zobrist_hash
    for uci in ("e2e4", "d7d5", "e4d5", "d8d5"):
        g.apply_uci(uci)
    assert g.move_history_uci() == ["e2e4", "d7d5", "e4d5", "d8d5"]
    undone = [g.undo_move().to_uci() for _ in range(4)]
    assert undone == ["d8d5", "e4d5", "d7d5", "e2e4"]
    assert g.to_fen() == STARTPOS_FEN
    assert g.state.zobrist_hash == hash0
    assert g.repetition == {hash0: 1}


def test_undo_without_history_raises() -> None:
    with pytest.raises(ValueError):
        Game.new().undo_move()


def test_malformed_uci_is_value_error() -> None:
    g = Game.new()
    with pytest.raises(ValueError):
        g.apply_uci("e2")
    with pytest.raises(ValueError):
        g.apply_uci("e7e8k")


def test_illegal_uci_leaves_game_unchanged() -> None:
    g = Game.new()
    with pytest.raises(IllegalMoveError):
        g.apply_uci("e2e5")
    assert g.to_fen() == STARTPOS_FEN
    assert g.history == []


def test_from_fen_rejects_invalid_position() -> None:
    with pytest.raises(InvalidPositionError):
        Game.from_fen("8/8/8/8/8/8/8/8 w - - 0 1")


def test_no_moves_after_checkmate() -> None:
    g = Game.new()
    for uci in ("f2f3", "e7e5", "g2g4", "d8h4"):
        g.apply_uci(uci)
    assert g.checkmate()
    assert g.is_over()
    assert g.legal_moves() == []
    with pytest.raises(IllegalMoveError):
        g.apply_uci("a2a3")
    # Undo reopens the game
    g.undo_move()
    assert not g.is_over()
    assert g.status is TerminalStatus.IN_PROGRESS


def test_in_check_flag() -> None:
    g = Game.from_fen("4k3/8/8/8/8/8/8/4K2R w - - 0 1")
    g.apply_uci("h1h8")
    assert g.in_check()
    assert g.status is TerminalStatus.CHECK
    assert not g.is_over()


def test_stalemate_flag() -> None:
    g = Game.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert g.stalemate()
    assert g.is_draw()
    assert g.is_over()


def test_threefold_repetition_detected_when_enabled() -> None:
    g = Game.new(DrawPolicy(detect_repetition=True))
    for uci in SHUFFLE:
        g.apply_uci(uci)
    assert g.status is TerminalStatus.IN_PROGRESS
    for uci in SHUFFLE:
        g.apply_uci(uci)
    assert g.status is TerminalStatus.DRAW_REPETITION
    assert g.is_draw()


def test_threefold_repetition_claimable_by_default() -> None:
    g = Game.new()
    assert not g.can_claim_draw()
    with pytest.raises(ValueError):
        g.claim_draw()
    for uci in SHUFFLE * 2:
        g.apply_uci(uci)
    assert g.status is TerminalStatus.IN_PROGRESS
    assert g.can_claim_draw()
    assert g.claim_draw() is TerminalStatus.DRAW_REPETITION
    assert g.is_over()


def test_fifty_move_claim() -> None:
    g = Game.from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 99 80", DrawPolicy(fifty_move="claimable"))
    assert not g.can_claim_draw()
    g.apply_uci("a1a2")
    assert g.status is TerminalStatus.IN_PROGRESS
    assert g.can_claim_draw()
    assert g.claim_draw() is TerminalStatus.DRAW_FIFTY_MOVE


def test_move_history_returns_moves() -> None:
    g = Game.new()
    played = g.apply_uci("b1c3")
    assert g.move_history() == [played]
    assert str(played) == "Nb1-c3"
