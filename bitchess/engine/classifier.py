from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attacks import is_in_check
from .bitboards import BitboardSet
from .legality import has_legal_move
from .squares import DARK_SQUARES, LIGHT_SQUARES, popcount
from .state import GameState
from .types import Color, PieceType, TerminalStatus


FIFTY_MOVE_AUTOMATIC = "automatic"
FIFTY_MOVE_CLAIMABLE = "claimable"
FIFTY_MOVE_LIMIT = 100


@dataclass(frozen=True)
class DrawPolicy:
    """Which draw rules the classifier reports on its own.

    - ``fifty_move``: ``"automatic"`` reports ``DRAW_FIFTY_MOVE`` as soon as
      the halfmove clock reaches 100; ``"claimable"`` leaves it to a player
      claim (see :meth:`bitchess.engine.game.Game.claim_draw`).
    - ``detect_repetition``: report threefold repetition. Needs a repetition
      count, which only a :class:`~bitchess.engine.game.Game` history has.
    - ``detect_insufficient_material``: report dead positions (K v K,
      K+minor v K, bishops only and all on one square colour).
    """

    fifty_move: str = FIFTY_MOVE_AUTOMATIC
    detect_repetition: bool = False
    detect_insufficient_material: bool = False

    def __post_init__(self) -> None:
        if self.fifty_move not in (FIFTY_MOVE_AUTOMATIC, FIFTY_MOVE_CLAIMABLE):
            raise ValueError(f"invalid fifty-move mode: {self.fifty_move!r}")


DEFAULT_POLICY = DrawPolicy()


def insufficient_material(board: BitboardSet) -> bool:
    for color in Color:
        if (
            board.pieces(color, PieceType.PAWN)
            | board.pieces(color, PieceType.ROOK)
            | board.pieces(color, PieceType.QUEEN)
        ):
            return False
    knights = board.pieces(Color.WHITE, PieceType.KNIGHT) | board.pieces(
        Color.BLACK, PieceType.KNIGHT
    )
    bishops = board.pieces(Color.WHITE, PieceType.BISHOP) | board.pieces(
        Color.BLACK, PieceType.BISHOP
    )
    if popcount(knights | bishops) <= 1:
        return True
    if knights:
        return False
    return not (bishops & LIGHT_SQUARES) or not (bishops & DARK_SQUARES)


def classify(
    state: GameState, policy: Optional[DrawPolicy] = None, repetitions: int = 1
) -> TerminalStatus:
    """Classify ``state`` from the point of view of the side to move.

    Mate and stalemate take precedence over every draw rule; an enabled draw
    rule takes precedence over a plain check.

    Args:
        state: Position to classify.
        policy: Draw rules to apply, defaults to :data:`DEFAULT_POLICY`.
        repetitions: How often this position has occurred in the game so far,
            including now. Only consulted when repetition detection is on.
    """
    policy = policy or DEFAULT_POLICY
    in_check = is_in_check(state, state.side_to_move)
    if not has_legal_move(state):
        return TerminalStatus.CHECKMATE if in_check else TerminalStatus.STALEMATE
    if policy.fifty_move == FIFTY_MOVE_AUTOMATIC and state.halfmove_clock >= FIFTY_MOVE_LIMIT:
        return TerminalStatus.DRAW_FIFTY_MOVE
    if policy.detect_repetition and repetitions >= 3:
        return TerminalStatus.DRAW_REPETITION
    if policy.detect_insufficient_material and insufficient_material(state.board):
        return TerminalStatus.DRAW_INSUFFICIENT_MATERIAL
    return TerminalStatus.CHECK if in_check else TerminalStatus.IN_PROGRESS
