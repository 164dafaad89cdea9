from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .squares import popcount
from .types import Color, PieceType


def piece_index(color: Color, piece: PieceType) -> int:
    """Slot of the (color, piece) bitboard: white pawn .. white king, then black."""
    return color * 6 + piece


@dataclass
class BitboardSet:
    """Twelve piece bitboards plus the per-color and total occupancy unions.

    Notes:
    - ``bb`` is indexed by :func:`piece_index`.
    - ``occ`` holds the white and black unions and ``occ_all`` their union;
      all three are maintained incrementally by the mutators.
    - Mutators are only called by the move executor and by position import.
      Overlapping placements are programming errors and trip assertions.
    """

    bb: List[int] = field(default_factory=lambda: [0] * 12)
    occ: List[int] = field(default_factory=lambda: [0, 0])
    occ_all: int = 0

    def copy(self) -> "BitboardSet":
        return BitboardSet(bb=list(self.bb), occ=list(self.occ), occ_all=self.occ_all)

    # --- Queries ---
    def pieces(self, color: Color, piece: PieceType) -> int:
        return self.bb[color * 6 + piece]

    def occupancy(self, color: Color) -> int:
        return self.occ[color]

    def all_occupancy(self) -> int:
        return self.occ_all

    def piece_at(self, sq: int) -> Optional[Tuple[Color, PieceType]]:
        """Return the (color, piece) on ``sq`` or ``None`` for an empty square."""
        mask = 1 << sq
        if not self.occ_all & mask:
            return None
        color = Color.WHITE if self.occ[Color.WHITE] & mask else Color.BLACK
        base = color * 6
        for piece in PieceType:
            if self.bb[base + piece] & mask:
                return color, piece
        raise AssertionError(f"occupancy set on square {sq} without a piece bitboard")

    def king_square(self, color: Color) -> int:
        kings = self.bb[color * 6 + PieceType.KING]
        assert kings and kings & (kings - 1) == 0, "exactly one king per side"
        return kings.bit_length() - 1

    # --- Mutation ---
    def place(self, color: Color, piece: PieceType, sq: int) -> None:
        mask = 1 << sq
        assert not self.occ_all & mask, f"square {sq} already occupied"
        self.bb[color * 6 + piece] |= mask
        self.occ[color] |= mask
        self.occ_all |= mask

    def remove(self, color: Color, piece: PieceType, sq: int) -> None:
        mask = 1 << sq
        idx = color * 6 + piece
        assert self.bb[idx] & mask, f"no {color.name} {piece.name} on square {sq}"
        self.bb[idx] ^= mask
        self.occ[color] ^= mask
        self.occ_all ^= mask

    def move(self, color: Color, piece: PieceType, from_sq: int, to_sq: int) -> None:
        self.remove(color, piece, from_sq)
        self.place(color, piece, to_sq)

    # --- Invariants ---
    def validate(self) -> None:
        """Assert the no-overlap, single-king and aggregate-union invariants."""
        seen = 0
        unions = [0, 0]
        for color in Color:
            for piece in PieceType:
                b = self.bb[color * 6 + piece]
                assert not seen & b, "piece bitboards overlap"
                seen |= b
                unions[color] |= b
            assert popcount(self.bb[color * 6 + PieceType.KING]) == 1, (
                f"{color.name} must have exactly one king"
            )
        assert unions == self.occ, "color occupancy out of sync"
        assert seen == self.occ_all, "total occupancy out of sync"
