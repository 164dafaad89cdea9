from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List

from .bitboards import BitboardSet
from .squares import (
    east,
    lsb,
    msb,
    north,
    north_east,
    north_west,
    south,
    south_east,
    south_west,
    west,
)
from .types import Color, PieceType

if TYPE_CHECKING:  # pragma: no cover
    from .state import GameState


def _leaper_table(steps: List[Callable[[int], int]]) -> List[int]:
    table = [0] * 64
    for sq in range(64):
        origin = 1 << sq
        attacks = 0
        for step in steps:
            attacks |= step(origin)
        table[sq] = attacks
    return table


KNIGHT_ATTACKS = _leaper_table(
    [
        lambda b: north(north_east(b)),
        lambda b: north(north_west(b)),
        lambda b: east(north_east(b)),
        lambda b: west(north_west(b)),
        lambda b: south(south_east(b)),
        lambda b: south(south_west(b)),
        lambda b: east(south_east(b)),
        lambda b: west(south_west(b)),
    ]
)
KING_ATTACKS = _leaper_table(
    [north, south, east, west, north_east, north_west, south_east, south_west]
)
# PAWN_ATTACKS[color][sq]: squares a pawn of `color` on `sq` attacks.
PAWN_ATTACKS = [
    _leaper_table([north_east, north_west]),
    _leaper_table([south_east, south_west]),
]

# Ray directions. The first four grow towards higher square indices, so the
# nearest blocker on those rays is the lowest set bit; on the rest it is the
# highest.
N, E, NE, NW, S, W, SE, SW = range(8)
_DIRECTION_SHIFTS = (north, east, north_east, north_west, south, west, south_east, south_west)
ORTHOGONAL = (N, E, S, W)
DIAGONAL = (NE, NW, SE, SW)


def _ray_table() -> List[List[int]]:
    rays = [[0] * 64 for _ in range(8)]
    for d, step in enumerate(_DIRECTION_SHIFTS):
        for sq in range(64):
            ray = 0
            b = step(1 << sq)
            while b:
                ray |= b
                b = step(b)
            rays[d][sq] = ray
    return rays


RAYS = _ray_table()


def _slide(sq: int, occ: int, directions: tuple) -> int:
    attacks = 0
    for d in directions:
        ray = RAYS[d][sq]
        blockers = ray & occ
        if blockers:
            first = lsb(blockers) if d < 4 else msb(blockers)
            ray ^= RAYS[d][first]
        attacks |= ray
    return attacks


def bishop_attacks(sq: int, occ: int) -> int:
    """Diagonal reach from ``sq``, each ray stopping on (and including) the first occupant."""
    return _slide(sq, occ, DIAGONAL)


def rook_attacks(sq: int, occ: int) -> int:
    return _slide(sq, occ, ORTHOGONAL)


def queen_attacks(sq: int, occ: int) -> int:
    return _slide(sq, occ, ORTHOGONAL) | _slide(sq, occ, DIAGONAL)


AttackFn = Callable[[int, int, Color], int]

# Per-piece attack sets from a square given total occupancy, shared by check
# detection and move generation.
PIECE_ATTACKS: Dict[PieceType, AttackFn] = {
    PieceType.PAWN: lambda sq, occ, color: PAWN_ATTACKS[color][sq],
    PieceType.KNIGHT: lambda sq, occ, color: KNIGHT_ATTACKS[sq],
    PieceType.BISHOP: lambda sq, occ, color: bishop_attacks(sq, occ),
    PieceType.ROOK: lambda sq, occ, color: rook_attacks(sq, occ),
    PieceType.QUEEN: lambda sq, occ, color: queen_attacks(sq, occ),
    PieceType.KING: lambda sq, occ, color: KING_ATTACKS[sq],
}


def is_attacked(board: BitboardSet, sq: int, by_color: Color) -> bool:
    """Return True if any ``by_color`` piece attacks ``sq``.

    Casts outward from the target: a piece attacks ``sq`` iff the same piece
    type standing on ``sq`` would reach it (pawns use the defender's
    direction). Pawns count as attacking their diagonals whether or not there
    is anything there to capture.
    """
    bb = board.bb
    base = by_color * 6
    if PAWN_ATTACKS[by_color ^ 1][sq] & bb[base + PieceType.PAWN]:
        return True
    if KNIGHT_ATTACKS[sq] & bb[base + PieceType.KNIGHT]:
        return True
    if KING_ATTACKS[sq] & bb[base + PieceType.KING]:
        return True
    occ = board.occ_all
    queens = bb[base + PieceType.QUEEN]
    diag = bb[base + PieceType.BISHOP] | queens
    if diag and bishop_attacks(sq, occ) & diag:
        return True
    ortho = bb[base + PieceType.ROOK] | queens
    return bool(ortho and rook_attacks(sq, occ) & ortho)


def is_in_check(state: "GameState", color: Color) -> bool:
    board = state.board
    return is_attacked(board, board.king_square(color), color.opponent)
