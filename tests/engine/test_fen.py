from __future__ import annotations

import pytest

from bitchess.engine.api import load_state
from bitchess.engine.errors import InvalidPositionError
from bitchess.engine.state import GameState, STARTPOS_FEN
from bitchess.engine.types import CastlingRights, Color, TerminalStatus


def test_startpos_round_trip() -> None:
    s = GameState.from_fen(STARTPOS_FEN)
    assert s.to_fen() == STARTPOS_FEN
    assert s.side_to_move is Color.WHITE
    assert s.castling == CastlingRights.ALL
    assert s.ep_square is None


@pytest.mark.parametrize(
    "fen",
    [
        # Mixed pieces and empty squares, some castling rights
        "r1bqkbnr/pppp1ppp/2n5/4p3/3P4/5N2/PPP1PPPP/RNBQKB1R b KQ - 2 3",
        # No castling rights, ep target present
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - e3 0 1",
        # All castling rights
        "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1",
        # Partial rights in canonical order
        "r3k2r/8/8/8/8/8/8/R3K2R b Kq - 7 40",
    ],
)
def test_round_trip_various_positions(fen: str) -> None:
    assert GameState.from_fen(fen).to_fen() == fen


@pytest.mark.parametrize(
    "fen",
    [
        "",  # empty
        "8/8/8/8/8/8/8 w - - 0 1",  # not enough ranks
        "4k3/8/8/8/8/8/8/4K3 w - - 0",  # missing fields
        "4k3/8/8/8/8/8/8/4K3 x - - 0 1",  # bad side to move
        "4k3/8/8/8/8/8/8/4K3 w A - 0 1",  # bad castling
        "4k3/8/8/8/8/8/8/4K3 w KK - 0 1",  # repeated castling flag
        "4k3/8/8/8/8/8/8/4K3 w - z9 0 1",  # bad ep square
        "4k3/8/8/8/8/8/8/4K3 w - - -1 1",  # bad halfmove
        "4k3/8/8/8/8/8/8/4K3 w - - 0 0",  # bad fullmove
        "9/8/8/8/8/8/8/8 w - - 0 1",  # too many squares
        "4k3/8/8/8/8/8/8/4K2 w - - 0 1",  # too few squares
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",  # bad piece
        "rnbqkbnr/pppppppp/²²²²/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",  # non-ASCII digits
        "4k3/0008/8/8/8/8/8/4K3 w - - 0 1",  # zero run
        "4k3/8/8/8/8/8/8/4K3 w - - ٣ 1",  # non-ASCII halfmove
    ],
)
def test_malformed_fen_raises(fen: str) -> None:
    with pytest.raises(InvalidPositionError):
        GameState.from_fen(fen)


@pytest.mark.parametrize(
    "fen",
    [
        "8/8/8/8/8/8/8/4K3 w - - 0 1",  # black king missing
        "4k3/8/8/8/8/8/8/3KK3 w - - 0 1",  # two white kings
        "4k3/8/8/8/8/8/8/P3K3 w - - 0 1",  # pawn on first rank
        "4k2p/8/8/8/8/8/8/4K3 w - - 0 1",  # pawn on last rank
        "4k3/8/8/8/8/8/8/4K2r b - - 0 1",  # white (not to move) in check
        "4k3/8/8/8/4P3/8/8/4K3 w - e3 0 1",  # ep square on the mover's side
        "4k3/8/8/8/8/8/8/4K3 b - e3 0 1",  # ep square with no pawn in front
    ],
)
def test_structurally_invalid_positions_raise(fen: str) -> None:
    with pytest.raises(InvalidPositionError):
        GameState.from_fen(fen)


def test_invalid_position_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        load_state("not a fen")


def test_load_state_classifies_position() -> None:
    mated = load_state("7k/6Q1/6K1/8/8/8/8/8 b - - 0 1")
    assert mated.status is TerminalStatus.CHECKMATE
    fresh = load_state(STARTPOS_FEN)
    assert fresh.status is TerminalStatus.IN_PROGRESS
