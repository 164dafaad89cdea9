from __future__ import annotations

from typing import List

from ..engine.bitboards import BitboardSet
from ..engine.types import Color


CELL_WIDTH = 7
_BORDER = "  " + "#" * (CELL_WIDTH * 8)
_PADDING = "  " + "#     #" * 8


def square_char(board: BitboardSet, sq: int, empty: str = " ") -> str:
    found = board.piece_at(sq)
    if found is None:
        return empty
    color, piece = found
    return piece.letter if color is Color.WHITE else piece.letter.lower()


def render_ascii(board: BitboardSet, empty: str = " ") -> str:
    """Draw the board as framed cells, rank 8 on top, white in uppercase.

    Read-only: only ``piece_at`` is consulted.
    """
    if len(empty) != 1:
        raise ValueError("empty-square marker must be a single character")
    lines: List[str] = [_BORDER]
    for rank in range(7, -1, -1):
        cells = "".join(
            f"#  {square_char(board, rank * 8 + file, empty)}  #" for file in range(8)
        )
        lines.extend([_PADDING, f"{rank + 1} {cells}", _PADDING, _BORDER])
    lines.append("  " + "".join(f"   {chr(ord('A') + f)}   " for f in range(8)).rstrip())
    return "\n".join(lines) + "\n"


def render_compact(board: BitboardSet) -> str:
    """One line per rank, ``.`` for empty squares."""
    rows = []
    for rank in range(7, -1, -1):
        row = " ".join(square_char(board, rank * 8 + f, ".") for f in range(8))
        rows.append(f"{rank + 1} {row}")
    rows.append("  a b c d e f g h")
    return "\n".join(rows)
