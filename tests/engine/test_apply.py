from __future__ import annotations

import pytest

from bitchess.engine.api import apply_move, create_initial_state, legal_moves, load_state
from bitchess.engine.errors import IllegalMoveError
from bitchess.engine.move import Move
from bitchess.engine.squares import bit, str_to_square
from bitchess.engine.state import STARTPOS_FEN
from bitchess.engine.types import Color, MoveFlag, PieceType, TerminalStatus


def test_initial_state_has_twenty_moves() -> None:
    s = create_initial_state()
    assert s.status is TerminalStatus.IN_PROGRESS
    assert len(legal_moves(s)) == 20


def test_apply_returns_new_state_and_does_not_mutate() -> None:
    s = create_initial_state()
    e2, e4 = str_to_square("e2"), str_to_square("e4")
    mv = Move(e2, e4, PieceType.PAWN, flag=MoveFlag.DOUBLE_PUSH)
    assert mv in legal_moves(s)

    s2 = apply_move(s, mv)

    # Original state unchanged
    assert s.to_fen() == STARTPOS_FEN

    assert s2.side_to_move is Color.BLACK
    assert s2.ep_square == str_to_square("e3")
    assert s2.halfmove_clock == 0
    assert s2.fullmove_number == 1
    pawns = s2.board.pieces(Color.WHITE, PieceType.PAWN)
    assert not pawns & bit(e2)
    assert pawns & bit(e4)
    assert s2.status is TerminalStatus.IN_PROGRESS
    assert s2.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


def test_apply_rejects_illegal_move_and_leaves_state() -> None:
    s = create_initial_state()
    # e2e5 is illegal from the start position
    bad = Move(str_to_square("e2"), str_to_square("e5"), PieceType.PAWN)
    with pytest.raises(IllegalMoveError):
        apply_move(s, bad)
    assert s.to_fen() == STARTPOS_FEN


def test_apply_rejects_move_with_wrong_flag() -> None:
    s = create_initial_state()
    mv = Move(str_to_square("e2"), str_to_square("e4"), PieceType.PAWN)
    with pytest.raises(IllegalMoveError):
        apply_move(s, mv)


def test_illegal_move_error_is_a_value_error() -> None:
    s = create_initial_state()
    with pytest.raises(ValueError):
        apply_move(s, Move(0, 63, PieceType.ROOK))


def test_pinned_piece_cannot_move() -> None:
    # Knight on e2 is pinned against the e1 king by the e8 rook
    s = load_state("k3r3/8/8/8/8/8/4N3/4K3 w - - 0 1")
    assert not any(m.piece is PieceType.KNIGHT for m in legal_moves(s))
