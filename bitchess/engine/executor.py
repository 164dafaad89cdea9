from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple, Optional

from .errors import IllegalMoveError
from .move import Move, describe_move
from .movegen import CASTLE_BY_FLAG, ROOK_HOME_RIGHTS
from .state import GameState
from .types import CastlingRights, Color, MoveFlag, PieceType, TerminalStatus
from .zobrist import MASK64, ZOBRIST

if TYPE_CHECKING:  # pragma: no cover
    from .classifier import DrawPolicy


logger = logging.getLogger(__name__)


class UndoRecord(NamedTuple):
    """Everything :func:`unmake_move` needs to restore the pre-move state."""

    move: Move
    castling: CastlingRights
    ep_square: Optional[int]
    halfmove_clock: int
    fullmove_number: int
    status: TerminalStatus
    zobrist_hash: int


def _capture_square(move: Move, color: Color) -> int:
    if move.flag is MoveFlag.EN_PASSANT:
        # The captured pawn sits behind the target square from the mover's view.
        return move.to_sq - 8 if color is Color.WHITE else move.to_sq + 8
    return move.to_sq


def make_move(state: GameState, move: Move) -> UndoRecord:
    """Apply ``move`` to ``state`` in place and return its inverse record.

    No legality check is made; ``move`` must come from move generation for
    this exact state. ``status`` is left as it was, callers that need it
    reclassify.
    """
    board = state.board
    color = state.side_to_move
    enemy = color.opponent
    undo = UndoRecord(
        move,
        state.castling,
        state.ep_square,
        state.halfmove_clock,
        state.fullmove_number,
        state.status,
        state.zobrist_hash,
    )
    keys = ZOBRIST.piece_square
    h = state.zobrist_hash
    from_sq, to_sq, piece = move.from_sq, move.to_sq, move.piece

    if move.captured is not None:
        cap_sq = _capture_square(move, color)
        board.remove(enemy, move.captured, cap_sq)
        h ^= keys[enemy * 6 + move.captured][cap_sq]

    board.remove(color, piece, from_sq)
    h ^= keys[color * 6 + piece][from_sq]
    placed = move.promotion if move.promotion is not None else piece
    board.place(color, placed, to_sq)
    h ^= keys[color * 6 + placed][to_sq]

    if move.is_castle:
        spec = CASTLE_BY_FLAG[(color, move.flag)]
        board.move(color, PieceType.ROOK, spec.rook_from, spec.rook_to)
        rook_keys = keys[color * 6 + PieceType.ROOK]
        h ^= rook_keys[spec.rook_from] ^ rook_keys[spec.rook_to]

    rights = state.castling
    if rights:
        if piece is PieceType.KING:
            rights &= ~CastlingRights.for_color(color)
        elif piece is PieceType.ROOK and from_sq in ROOK_HOME_RIGHTS:
            rights &= ~(ROOK_HOME_RIGHTS[from_sq] & CastlingRights.for_color(color))
        if move.captured is PieceType.ROOK and to_sq in ROOK_HOME_RIGHTS:
            rights &= ~(ROOK_HOME_RIGHTS[to_sq] & CastlingRights.for_color(enemy))
        if rights != state.castling:
            h ^= ZOBRIST.castling[int(state.castling)] ^ ZOBRIST.castling[int(rights)]
            state.castling = rights

    if state.ep_square is not None:
        h ^= ZOBRIST.ep_file[state.ep_square & 7]
    if move.flag is MoveFlag.DOUBLE_PUSH:
        state.ep_square = (from_sq + to_sq) // 2
        h ^= ZOBRIST.ep_file[state.ep_square & 7]
    else:
        state.ep_square = None

    if piece is PieceType.PAWN or move.captured is not None:
        state.halfmove_clock = 0
    else:
        state.halfmove_clock += 1
    if color is Color.BLACK:
        state.fullmove_number += 1

    state.side_to_move = enemy
    state.zobrist_hash = (h ^ ZOBRIST.side_to_move) & MASK64
    return undo


def unmake_move(state: GameState, undo: UndoRecord) -> None:
    """Revert the move recorded in ``undo``; must be the last one made on ``state``."""
    board = state.board
    move = undo.move
    color = state.side_to_move.opponent
    enemy = state.side_to_move

    if move.is_castle:
        spec = CASTLE_BY_FLAG[(color, move.flag)]
        board.move(color, PieceType.ROOK, spec.rook_to, spec.rook_from)

    placed = move.promotion if move.promotion is not None else move.piece
    board.remove(color, placed, move.to_sq)
    board.place(color, move.piece, move.from_sq)
    if move.captured is not None:
        board.place(enemy, move.captured, _capture_square(move, color))

    state.side_to_move = color
    state.castling = undo.castling
    state.ep_square = undo.ep_square
    state.halfmove_clock = undo.halfmove_clock
    state.fullmove_number = undo.fullmove_number
    state.status = undo.status
    state.zobrist_hash = undo.zobrist_hash


def apply_move(
    state: GameState, move: Move, policy: Optional["DrawPolicy"] = None
) -> GameState:
    """Return the state after ``move``; ``state`` itself is never modified.

    Raises:
        IllegalMoveError: If ``move`` is not among the legal moves of ``state``.
    """
    from .classifier import classify
    from .legality import legal_moves

    if move not in legal_moves(state):
        logger.debug("rejected illegal move %s", describe_move(move))
        raise IllegalMoveError(f"illegal move: {move.to_uci()}")
    nxt = state.copy()
    make_move(nxt, move)
    nxt.status = classify(nxt, policy)
    return nxt
