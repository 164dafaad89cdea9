from __future__ import annotations

from enum import Enum, IntEnum, IntFlag


class Color(IntEnum):
    WHITE = 0
    BLACK = 1

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    def to_fen(self) -> str:
        return "w" if self is Color.WHITE else "b"

    @classmethod
    def from_fen(cls, token: str) -> "Color":
        if token == "w":
            return cls.WHITE
        if token == "b":
            return cls.BLACK
        raise ValueError("side to move must be 'w' or 'b'")


class PieceType(IntEnum):
    PAWN = 0
    KNIGHT = 1
    BISHOP = 2
    ROOK = 3
    QUEEN = 4
    KING = 5

    @property
    def letter(self) -> str:
        """Uppercase piece letter, e.g. ``"N"`` for a knight."""
        return _LETTERS[self]

    @classmethod
    def from_letter(cls, ch: str) -> "PieceType":
        try:
            return cls(_LETTERS.index(ch.upper()))
        except ValueError:
            raise ValueError(f"invalid piece letter: {ch!r}") from None


_LETTERS = "PNBRQK"

PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


class MoveFlag(Enum):
    NORMAL = "normal"
    DOUBLE_PUSH = "double_push"
    EN_PASSANT = "en_passant"
    CASTLE_KINGSIDE = "castle_kingside"
    CASTLE_QUEENSIDE = "castle_queenside"


class CastlingRights(IntFlag):
    """Four independent castling flags, ordered like the FEN field ``KQkq``."""

    NONE = 0
    WHITE_KINGSIDE = 1
    WHITE_QUEENSIDE = 2
    BLACK_KINGSIDE = 4
    BLACK_QUEENSIDE = 8
    WHITE = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE | BLACK

    def to_fen(self) -> str:
        out = "".join(ch for flag, ch in _FEN_ORDER if self & flag)
        return out or "-"

    @classmethod
    def from_fen(cls, field: str) -> "CastlingRights":
        rights = cls.NONE
        if field == "-":
            return rights
        if not field:
            raise ValueError("invalid castling rights")
        for ch in field:
            flag = _FEN_FLAGS.get(ch)
            if flag is None or rights & flag:
                raise ValueError("invalid castling rights")
            rights |= flag
        return rights

    @classmethod
    def for_color(cls, color: Color) -> "CastlingRights":
        return cls.WHITE if color is Color.WHITE else cls.BLACK


_FEN_ORDER = (
    (CastlingRights.WHITE_KINGSIDE, "K"),
    (CastlingRights.WHITE_QUEENSIDE, "Q"),
    (CastlingRights.BLACK_KINGSIDE, "k"),
    (CastlingRights.BLACK_QUEENSIDE, "q"),
)
_FEN_FLAGS = {ch: flag for flag, ch in _FEN_ORDER}


class TerminalStatus(Enum):
    IN_PROGRESS = "in_progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_FIFTY_MOVE = "draw_fifty_move"
    DRAW_REPETITION = "draw_repetition"
    DRAW_INSUFFICIENT_MATERIAL = "draw_insufficient_material"

    @property
    def is_terminal(self) -> bool:
        return self not in (TerminalStatus.IN_PROGRESS, TerminalStatus.CHECK)

    @property
    def is_draw(self) -> bool:
        return self.is_terminal and self is not TerminalStatus.CHECKMATE
