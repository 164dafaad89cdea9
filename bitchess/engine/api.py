"""Public engine surface.

Every function takes the position explicitly; nothing here keeps state
between calls, so independent positions can be worked on side by side.
"""

from __future__ import annotations

from typing import Optional

from . import attacks
from .classifier import DrawPolicy
from .classifier import classify as _classify
from .executor import UndoRecord, apply_move, make_move, unmake_move
from .legality import legal_moves
from .move import Move, describe_move
from .perft import perft
from .state import GameState
from .types import Color, TerminalStatus


def create_initial_state() -> GameState:
    state = GameState.initial()
    state.status = _classify(state)
    return state


def load_state(fen: str, policy: Optional[DrawPolicy] = None) -> GameState:
    """Import a FEN position and classify it.

    Raises:
        InvalidPositionError: If the FEN is malformed or structurally invalid.
    """
    state = GameState.from_fen(fen)
    state.status = _classify(state, policy)
    return state


def is_in_check(state: GameState, color: Color) -> bool:
    return attacks.is_in_check(state, color)


def is_attacked(state: GameState, square: int, by_color: Color) -> bool:
    return attacks.is_attacked(state.board, square, by_color)


def classify(state: GameState, policy: Optional[DrawPolicy] = None) -> TerminalStatus:
    return _classify(state, policy)


__all__ = [
    "DrawPolicy",
    "GameState",
    "Move",
    "UndoRecord",
    "apply_move",
    "classify",
    "create_initial_state",
    "describe_move",
    "is_attacked",
    "is_in_check",
    "legal_moves",
    "load_state",
    "make_move",
    "perft",
    "unmake_move",
]
