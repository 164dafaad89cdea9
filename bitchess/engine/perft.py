from __future__ import annotations

from typing import Dict

from .executor import make_move, unmake_move
from .legality import legal_moves
from .state import GameState


def perft(state: GameState, depth: int) -> int:
    """Compute perft node count for ``state`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Walks the tree with make/unmake on a private copy; ``state`` is untouched.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    return _perft(state.copy(), depth)


def _perft(state: GameState, depth: int) -> int:
    if depth == 0:
        return 1
    moves = legal_moves(state)
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        undo = make_move(state, move)
        nodes += _perft(state, depth - 1)
        unmake_move(state, undo)
    return nodes


def divide(state: GameState, depth: int) -> Dict[str, int]:
    """Per-root-move perft counts keyed by UCI string (``depth`` >= 1)."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    scratch = state.copy()
    out: Dict[str, int] = {}
    for move in legal_moves(scratch):
        undo = make_move(scratch, move)
        out[move.to_uci()] = _perft(scratch, depth - 1)
        unmake_move(scratch, undo)
    return out
