from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional

from .squares import square_to_str, str_to_square
from .types import PROMOTION_TYPES, MoveFlag, PieceType


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Attributes:
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).
        piece (PieceType): Type of the moving piece.
        captured (Optional[PieceType]): Type of the captured piece, if any.
            For en passant this is the pawn standing behind ``to_sq``.
        promotion (Optional[PieceType]): Piece a pawn turns into, if any.
        flag (MoveFlag): Special-move marker.
    """

    from_sq: int
    to_sq: int
    piece: PieceType
    captured: Optional[PieceType] = None
    promotion: Optional[PieceType] = None
    flag: MoveFlag = MoveFlag.NORMAL

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_castle(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = self.promotion.letter.lower() if self.promotion is not None else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo

    def __str__(self) -> str:
        return describe_move(self)


class UciMove(NamedTuple):
    from_sq: int
    to_sq: int
    promotion: Optional[PieceType] = None


def parse_uci(uci: str) -> UciMove:
    """Parse a UCI move string into its squares and promotion piece.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        UciMove: Parsed coordinates. Piece and flag are only known once the
            text is matched against a position's legal moves.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[PieceType] = None
    if len(uci) == 5:
        try:
            promo = PieceType.from_letter(uci[4])
        except ValueError:
            promo = None
        if promo not in PROMOTION_TYPES:
            raise ValueError(f"invalid promotion piece: {uci[4]!r}")
    return UciMove(from_sq, to_sq, promo)


def describe_move(move: Move) -> str:
    """Render ``move`` in long algebraic notation.

    Examples: ``Ng1-f3``, ``e4xd5``, ``e7-e8=Q``, ``e5xd6 e.p.``, ``O-O``.
    """
    if move.flag is MoveFlag.CASTLE_KINGSIDE:
        return "O-O"
    if move.flag is MoveFlag.CASTLE_QUEENSIDE:
        return "O-O-O"
    prefix = "" if move.piece is PieceType.PAWN else move.piece.letter
    sep = "x" if move.is_capture else "-"
    text = f"{prefix}{square_to_str(move.from_sq)}{sep}{square_to_str(move.to_sq)}"
    if move.promotion is not None:
        text += "=" + move.promotion.letter
    if move.flag is MoveFlag.EN_PASSANT:
        text += " e.p."
    return text
