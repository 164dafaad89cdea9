from __future__ import annotations

from typing import Iterable, Iterator, List

from .attacks import is_attacked
from .executor import make_move, unmake_move
from .move import Move
from .movegen import generate_pseudo_legal
from .state import GameState
from .types import PieceType


def _iter_legal(state: GameState, candidates: Iterable[Move]) -> Iterator[Move]:
    # Each candidate is made and unmade on a scratch copy; `state` is never touched.
    scratch = state.copy()
    board = scratch.board
    mover = state.side_to_move
    enemy = mover.opponent
    king_sq = board.king_square(mover)
    for move in candidates:
        undo = make_move(scratch, move)
        target = move.to_sq if move.piece is PieceType.KING else king_sq
        safe = not is_attacked(board, target, enemy)
        unmake_move(scratch, undo)
        if safe:
            yield move


def filter_legal(state: GameState, candidates: Iterable[Move]) -> List[Move]:
    """Keep the candidates that do not leave the mover's own king attacked."""
    return list(_iter_legal(state, candidates))


def legal_moves(state: GameState) -> List[Move]:
    """Return every legal move for the side to move, in generation order."""
    return filter_legal(state, generate_pseudo_legal(state))


def has_legal_move(state: GameState) -> bool:
    return next(_iter_legal(state, generate_pseudo_legal(state)), None) is not None
