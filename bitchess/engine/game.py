from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .attacks import is_in_check
from .classifier import FIFTY_MOVE_LIMIT, DrawPolicy, classify
from .errors import IllegalMoveError
from .executor import UndoRecord, make_move, unmake_move
from .legality import legal_moves
from .move import Move, describe_move, parse_uci
from .state import GameState
from .types import TerminalStatus


logger = logging.getLogger(__name__)


@dataclass
class Game:
    """Game wrapper around a position with history and draw bookkeeping.

    Responsibility: own the single live ``GameState``, validate and apply
    moves in place, keep the inverse records for undo and count position
    repeats for the repetition rule.
    """

    state: GameState
    policy: DrawPolicy = field(default_factory=DrawPolicy)
    history: List[UndoRecord] = field(default_factory=list)
    repetition: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def new(cls, policy: Optional[DrawPolicy] = None) -> "Game":
        return cls(state=GameState.initial(), policy=policy or DrawPolicy())

    @classmethod
    def from_fen(cls, fen: str, policy: Optional[DrawPolicy] = None) -> "Game":
        return cls(state=GameState.from_fen(fen), policy=policy or DrawPolicy())

    def __post_init__(self) -> None:
        # Seed repetition with current position
        h = self.state.zobrist_hash
        self.repetition[h] = self.repetition.get(h, 0) + 1
        self._reclassify()

    def to_fen(self) -> str:
        return self.state.to_fen()

    @property
    def status(self) -> TerminalStatus:
        return self.state.status

    def is_over(self) -> bool:
        return self.state.status.is_terminal

    def legal_moves(self) -> List[Move]:
        if self.is_over():
            return []
        return legal_moves(self.state)

    def find_move(self, uci: str) -> Move:
        """Resolve a UCI string to the matching legal move.

        Raises:
            ValueError: If ``uci`` is not well-formed.
            IllegalMoveError: If no legal move matches.
        """
        parsed = parse_uci(uci)
        for m in self.legal_moves():
            if (m.from_sq, m.to_sq, m.promotion) == parsed:
                return m
        raise IllegalMoveError(f"illegal move: {uci}")

    def apply_move(self, move: Move) -> None:
        if self.is_over():
            raise IllegalMoveError(f"game is over ({self.status.value})")
        if move not in legal_moves(self.state):
            logger.debug("rejected illegal move %s", describe_move(move))
            raise IllegalMoveError(f"illegal move: {move.to_uci()}")
        self.history.append(make_move(self.state, move))
        h = self.state.zobrist_hash
        self.repetition[h] = self.repetition.get(h, 0) + 1
        self._reclassify()

    def apply_uci(self, uci: str) -> Move:
        move = self.find_move(uci)
        self.apply_move(move)
        return move

    def undo_move(self) -> Move:
        if not self.history:
            raise ValueError("no moves to undo")
        # Decrement count for current position
        curr = self.state.zobrist_hash
        if curr in self.repetition:
            self.repetition[curr] -= 1
            if self.repetition[curr] <= 0:
                del self.repetition[curr]
        undo = self.history.pop()
        unmake_move(self.state, undo)
        return undo.move

    def _reclassify(self) -> None:
        count = self.repetition.get(self.state.zobrist_hash, 0)
        self.state.status = classify(self.state, self.policy, repetitions=count)

    # --- State flags for protocol ---
    def in_check(self) -> bool:
        return is_in_check(self.state, self.state.side_to_move)

    def checkmate(self) -> bool:
        return self.state.status is TerminalStatus.CHECKMATE

    def stalemate(self) -> bool:
        return self.state.status is TerminalStatus.STALEMATE

    def is_draw(self) -> bool:
        return self.state.status.is_draw

    def can_claim_draw(self) -> bool:
        """True when a fifty-move or threefold claim would be accepted."""
        if self.is_over():
            return False
        if self.state.halfmove_clock >= FIFTY_MOVE_LIMIT:
            return True
        return self.repetition.get(self.state.zobrist_hash, 0) >= 3

    def claim_draw(self) -> TerminalStatus:
        """End the game by a player's draw claim.

        Raises:
            ValueError: If neither the fifty-move nor the repetition rule applies.
        """
        if not self.can_claim_draw():
            raise ValueError("no draw to claim")
        if self.state.halfmove_clock >= FIFTY_MOVE_LIMIT:
            self.state.status = TerminalStatus.DRAW_FIFTY_MOVE
        else:
            self.state.status = TerminalStatus.DRAW_REPETITION
        return self.state.status

    def move_history(self) -> List[Move]:
        return [u.move for u in self.history]

    def move_history_uci(self) -> List[str]:
        return [u.move.to_uci() for u in self.history]
