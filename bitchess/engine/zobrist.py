from __future__ import annotations

from typing import List, TYPE_CHECKING

from .squares import iter_bits
from .types import Color

if TYPE_CHECKING:  # pragma: no cover
    from .state import GameState


MASK64 = 0xFFFFFFFFFFFFFFFF


class _SplitMix64:
    def __init__(self, seed: int) -> None:
        self.state = seed & MASK64

    def next(self) -> int:
        # Deterministic 64-bit SplitMix64
        self.state = (self.state + 0x9E3779B97F4A7C15) & MASK64
        z = self.state
        z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & MASK64
        z = (z ^ (z >> 27)) * 0x94D049BB133111EB & MASK64
        z = z ^ (z >> 31)
        return z & MASK64


class Zobrist:
    """Zobrist hashing keys.

    Table layout:
    - piece_square[12][64]: indexed like ``BitboardSet.bb``
    - side_to_move: toggled when black is to move
    - castling[16]: one key per combination of the four castling flags
    - ep_file[8]: files a..h
    """

    piece_square: List[List[int]]
    side_to_move: int
    castling: List[int]
    ep_file: List[int]

    def __init__(self, seed: int = 0xC0FFEE_F00D_DEAD) -> None:
        prng = _SplitMix64(seed)
        self.piece_square = [[prng.next() for _ in range(64)] for _ in range(12)]
        self.side_to_move = prng.next()
        flag_keys = [prng.next() for _ in range(4)]  # K, Q, k, q
        # Precombine so a rights change costs two lookups instead of four.
        self.castling = [0] * 16
        for rights in range(16):
            for i, key in enumerate(flag_keys):
                if rights & (1 << i):
                    self.castling[rights] ^= key
        self.ep_file = [prng.next() for _ in range(8)]


# Global deterministic table
ZOBRIST = Zobrist()


def compute_hash_from_scratch(state: "GameState") -> int:
    """Compute the 64-bit Zobrist hash of ``state``.

    Deterministic across runs given the fixed ZOBRIST table.
    """
    h = 0
    for idx, bb in enumerate(state.board.bb):
        keys = ZOBRIST.piece_square[idx]
        for sq in iter_bits(bb):
            h ^= keys[sq]
    if state.side_to_move is Color.BLACK:
        h ^= ZOBRIST.side_to_move
    h ^= ZOBRIST.castling[int(state.castling)]
    if state.ep_square is not None:
        h ^= ZOBRIST.ep_file[state.ep_square % 8]
    return h & MASK64
