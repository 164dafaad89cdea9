from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .game import Game
from .move import Move
from .types import TerminalStatus


logger = logging.getLogger(__name__)

MovePolicy = Callable[[Sequence[Move]], Move]


class RandomPolicy:
    """Pick uniformly among the offered moves.

    The random source is injected so callers (and tests) control the sequence.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def __call__(self, moves: Sequence[Move]) -> Move:
        if not moves:
            raise ValueError("no moves to choose from")
        return self.rng.choice(list(moves))


def first_move_policy(moves: Sequence[Move]) -> Move:
    if not moves:
        raise ValueError("no moves to choose from")
    return moves[0]


@dataclass
class SelfPlayResult:
    status: TerminalStatus
    plies: int
    final_fen: str
    moves: List[Move] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.status.is_terminal


def self_play(game: Game, policy: MovePolicy, max_plies: Optional[int] = None) -> SelfPlayResult:
    """Let ``policy`` play both sides until the game ends or ``max_plies`` is hit."""
    played: List[Move] = []
    while not game.is_over():
        if max_plies is not None and len(played) >= max_plies:
            logger.debug("self-play stopped at ply cap %d", max_plies)
            break
        move = policy(game.legal_moves())
        game.apply_move(move)
        played.append(move)
    if game.is_over():
        logger.debug("self-play ended: %s after %d plies", game.status.value, len(played))
    return SelfPlayResult(
        status=game.status, plies=len(played), final_fen=game.to_fen(), moves=played
    )
