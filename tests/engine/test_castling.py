from __future__ import annotations

import pytest

from bitchess.engine.api import apply_move, legal_moves, load_state
from bitchess.engine.errors import IllegalMoveError
from bitchess.engine.move import Move
from bitchess.engine.squares import str_to_square
from bitchess.engine.state import GameState
from bitchess.engine.types import CastlingRights, Color, MoveFlag, PieceType


OPEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
WHITE_OO = Move(str_to_square("e1"), str_to_square("g1"), PieceType.KING, flag=MoveFlag.CASTLE_KINGSIDE)
WHITE_OOO = Move(str_to_square("e1"), str_to_square("c1"), PieceType.KING, flag=MoveFlag.CASTLE_QUEENSIDE)


def moves_set(s: GameState) -> set[str]:
    return {m.to_uci() for m in legal_moves(s)}


def _play(s: GameState, uci: str) -> GameState:
    move = next(m for m in legal_moves(s) if m.to_uci() == uci)
    return apply_move(s, move)


def test_white_castling_available_when_clear_and_not_in_check() -> None:
    s = load_state(OPEN)
    ms = legal_moves(s)
    assert WHITE_OO in ms
    assert WHITE_OOO in ms


def test_black_castling_available() -> None:
    s = load_state("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
    ms = moves_set(s)
    assert "e8g8" in ms
    assert "e8c8" in ms


def test_castling_blocked_when_in_check() -> None:
    # The black queen on e5 checks the king down the e-file
    s = load_state("r3k2r/8/8/4q3/8/8/8/R3K2R w KQkq - 0 1")
    ms = moves_set(s)
    assert "e1g1" not in ms
    assert "e1c1" not in ms


def test_castling_blocked_through_attacked_square() -> None:
    # Black rook on f8 covers f1: kingside is out, queenside still fine
    s = load_state("4kr2/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    ms = moves_set(s)
    assert "e1g1" not in ms
    assert "e1c1" in ms


def test_castling_blocked_when_destination_attacked() -> None:
    s = load_state("4k1r1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert "e1g1" not in moves_set(s)


def test_queenside_allows_attacked_b_file_square() -> None:
    # b1 is crossed by the rook only; an attack on it does not matter
    s = load_state("1r2k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert "e1c1" in moves_set(s)


def test_castling_blocked_by_piece_between() -> None:
    s = load_state("4k3/8/8/8/8/8/8/RN2K1NR w KQ - 0 1")
    ms = moves_set(s)
    assert "e1g1" not in ms
    assert "e1c1" not in ms


def test_castling_requires_rook_on_home_square() -> None:
    # Right still recorded but the h1 rook is gone
    s = load_state("4k3/8/8/8/8/8/8/R3K3 w KQ - 0 1")
    ms = moves_set(s)
    assert "e1g1" not in ms
    assert "e1c1" in ms


def test_castling_moves_rook_correctly() -> None:
    s = load_state(OPEN)
    after = apply_move(s, WHITE_OO)
    board = after.board
    assert board.piece_at(str_to_square("g1")) == (Color.WHITE, PieceType.KING)
    assert board.piece_at(str_to_square("f1")) == (Color.WHITE, PieceType.ROOK)
    assert board.piece_at(str_to_square("h1")) is None
    assert board.piece_at(str_to_square("e1")) is None
    assert not after.castling & CastlingRights.WHITE
    assert after.castling & CastlingRights.BLACK == CastlingRights.BLACK


def test_black_queenside_castle_moves_rook() -> None:
    s = load_state("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
    after = _play(s, "e8c8")
    assert after.board.piece_at(str_to_square("d8")) == (Color.BLACK, PieceType.ROOK)
    assert after.board.piece_at(str_to_square("a8")) is None
    assert after.to_fen() == "2kr3r/8/8/8/8/8/8/R3K2R w KQ - 1 2"


def test_moving_rook_first_forfeits_castling() -> None:
    s = load_state(OPEN)
    s = _play(s, "h1g1")
    s = _play(s, "a8b8")
    s = _play(s, "g1h1")
    s = _play(s, "b8a8")
    # King and rook are back on their squares, but the right is gone for good
    assert not s.castling & CastlingRights.WHITE_KINGSIDE
    assert WHITE_OO not in legal_moves(s)
    with pytest.raises(IllegalMoveError):
        apply_move(s, WHITE_OO)
    assert WHITE_OOO in legal_moves(s)


def test_capturing_rook_on_home_square_clears_right() -> None:
    s = load_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    s = _play(s, "a1a8")
    assert not s.castling & CastlingRights.BLACK_QUEENSIDE
    assert not s.castling & CastlingRights.WHITE_QUEENSIDE
    assert s.castling & CastlingRights.BLACK_KINGSIDE
