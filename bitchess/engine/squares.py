from __future__ import annotations

from typing import Iterator


MASK64 = 0xFFFFFFFFFFFFFFFF

FILE_A = 0x0101010101010101
FILE_H = FILE_A << 7
RANK_1 = 0xFF
RANK_8 = RANK_1 << 56

NOT_FILE_A = ~FILE_A & MASK64
NOT_FILE_H = ~FILE_H & MASK64

LIGHT_SQUARES = 0x55AA55AA55AA55AA
DARK_SQUARES = ~LIGHT_SQUARES & MASK64


def file_of(sq: int) -> int:
    return sq & 7


def rank_of(sq: int) -> int:
    return sq >> 3


def make_square(file: int, rank: int) -> int:
    """Return the square index for 0-based ``file`` and ``rank``.

    Raises:
        ValueError: If either coordinate is outside 0..7.
    """
    if not (0 <= file < 8 and 0 <= rank < 8):
        raise ValueError(f"invalid coordinates: file={file} rank={rank}")
    return rank * 8 + file


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    return make_square(ord(s[0]) - ord("a"), int(s[1]) - 1)


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    return chr(ord("a") + file_of(idx)) + str(rank_of(idx) + 1)


def bit(sq: int) -> int:
    return 1 << sq


def lsb(bb: int) -> int:
    """Index of the least significant set bit (``bb`` must be non-zero)."""
    return (bb & -bb).bit_length() - 1


def msb(bb: int) -> int:
    """Index of the most significant set bit (``bb`` must be non-zero)."""
    return bb.bit_length() - 1


def popcount(bb: int) -> int:
    return bin(bb).count("1")


def iter_bits(bb: int) -> Iterator[int]:
    """Yield the index of every set bit, lowest first."""
    while bb:
        low = bb & -bb
        yield low.bit_length() - 1
        bb ^= low


# Edge-safe shifts. East-going shifts drop anything landing on file A
# (it wrapped from file H), west-going shifts drop anything landing on file H.


def north(bb: int) -> int:
    return (bb << 8) & MASK64


def south(bb: int) -> int:
    return bb >> 8


def east(bb: int) -> int:
    return (bb << 1) & NOT_FILE_A & MASK64


def west(bb: int) -> int:
    return (bb >> 1) & NOT_FILE_H


def north_east(bb: int) -> int:
    return (bb << 9) & NOT_FILE_A & MASK64


def north_west(bb: int) -> int:
    return (bb << 7) & NOT_FILE_H & MASK64


def south_east(bb: int) -> int:
    return (bb >> 7) & NOT_FILE_A


def south_west(bb: int) -> int:
    return (bb >> 9) & NOT_FILE_H
