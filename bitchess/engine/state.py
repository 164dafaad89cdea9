from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .attacks import is_attacked
from .bitboards import BitboardSet
from .errors import InvalidPositionError
from .squares import RANK_1, RANK_8, rank_of, square_to_str, str_to_square
from .types import CastlingRights, Color, PieceType, TerminalStatus
from .zobrist import compute_hash_from_scratch


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


@dataclass
class GameState:
    """Complete position: piece placement plus the rule-relevant counters.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - Only the move executor mutates a state; everything else reads it.
    - ``status`` is the classification of this position for the side to
      move and ``zobrist_hash`` its 64-bit position key.
    """

    board: BitboardSet
    side_to_move: Color
    castling: CastlingRights
    ep_square: Optional[int]
    halfmove_clock: int
    fullmove_number: int
    status: TerminalStatus = TerminalStatus.IN_PROGRESS
    zobrist_hash: int = 0

    @classmethod
    def initial(cls) -> "GameState":
        """Create the standard chess starting position."""
        return cls.from_fen(STARTPOS_FEN)

    def copy(self) -> "GameState":
        return GameState(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            ep_square=self.ep_square,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            status=self.status,
            zobrist_hash=self.zobrist_hash,
        )

    @classmethod
    def from_fen(cls, fen: str) -> "GameState":
        """Parse a Forsyth–Edwards Notation (FEN) string.

        Args:
            fen (str): FEN string describing the position to load.

        Returns:
            GameState: State with a freshly computed Zobrist hash. ``status``
                is left at ``IN_PROGRESS``; :func:`bitchess.engine.api.load_state`
                classifies it.

        Raises:
            InvalidPositionError: If ``fen`` is malformed, or describes a
                position that cannot arise in a game: a king count other than
                one per side, pawns on the first or last rank, the side not to
                move in check, or an en-passant target that no double push
                could have produced.
        """
        if not fen or not isinstance(fen, str):
            raise InvalidPositionError("FEN must be a non-empty string")
        parts = fen.strip().split()
        if len(parts) != 6:
            raise InvalidPositionError("FEN must have 6 fields")
        placement, stm, castling_field, ep, halfmove, fullmove = parts

        board = _parse_placement(placement)

        try:
            side = Color.from_fen(stm)
            castling = CastlingRights.from_fen(castling_field)
        except ValueError as e:
            raise InvalidPositionError(str(e)) from e

        ep_square: Optional[int] = None
        if ep != "-":
            try:
                ep_square = str_to_square(ep)
            except ValueError as e:
                raise InvalidPositionError("invalid en passant square") from e

        if not all(f.isascii() and f.isdigit() for f in (halfmove, fullmove)):
            raise InvalidPositionError("invalid move counters in FEN")
        halfmove_clock = int(halfmove)
        fullmove_number = int(fullmove)
        if fullmove_number <= 0:
            raise InvalidPositionError("invalid move counters in FEN")

        state = cls(
            board=board,
            side_to_move=side,
            castling=castling,
            ep_square=ep_square,
            halfmove_clock=halfmove_clock,
            fullmove_number=fullmove_number,
        )
        _check_structure(state)
        state.zobrist_hash = compute_hash_from_scratch(state)
        return state

    def to_fen(self) -> str:
        """Serialize the current position into a normalized FEN string."""
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):
            run = 0
            row = []
            for file_idx in range(8):
                found = self.board.piece_at(rank_idx * 8 + file_idx)
                if found is None:
                    run += 1
                    continue
                if run > 0:
                    row.append(str(run))
                    run = 0
                color, piece = found
                row.append(piece.letter if color is Color.WHITE else piece.letter.lower())
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        placement = "/".join(ranks_str)

        ep = square_to_str(self.ep_square) if self.ep_square is not None else "-"
        return (
            f"{placement} {self.side_to_move.to_fen()} {self.castling.to_fen()} {ep} "
            f"{self.halfmove_clock} {self.fullmove_number}"
        )


def _parse_placement(placement: str) -> BitboardSet:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidPositionError("FEN board must have 8 ranks")
    board = BitboardSet()
    for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
        file_idx = 0
        for ch in rank:
            if ch in "12345678":
                file_idx += int(ch)
                continue
            try:
                piece = PieceType.from_letter(ch)
            except ValueError as e:
                raise InvalidPositionError(f"invalid piece in FEN: {ch!r}") from e
            if file_idx >= 8:
                raise InvalidPositionError("too many squares in FEN rank")
            color = Color.WHITE if ch.isupper() else Color.BLACK
            board.place(color, piece, rank_idx * 8 + file_idx)
            file_idx += 1
        if file_idx != 8:
            raise InvalidPositionError("rank does not sum to 8 squares in FEN")
    return board


def _check_structure(state: GameState) -> None:
    board = state.board
    for color in Color:
        kings = board.pieces(color, PieceType.KING)
        if kings == 0 or kings & (kings - 1):
            raise InvalidPositionError(f"{color.name.lower()} must have exactly one king")
        if board.pieces(color, PieceType.PAWN) & (RANK_1 | RANK_8):
            raise InvalidPositionError("pawns cannot stand on the first or last rank")

    mover = state.side_to_move
    waiting = mover.opponent
    if is_attacked(board, board.king_square(waiting), mover):
        raise InvalidPositionError("side not to move is in check")

    ep = state.ep_square
    if ep is None:
        return
    # The opponent just pushed a pawn two squares, passing over `ep`.
    expected_rank = 5 if mover is Color.WHITE else 2
    step = -8 if mover is Color.WHITE else 8
    if rank_of(ep) != expected_rank:
        raise InvalidPositionError("invalid en passant square rank")
    pawn_sq = ep + step
    if (
        board.piece_at(ep) is not None
        or board.piece_at(ep - step) is not None
        or board.piece_at(pawn_sq) != (waiting, PieceType.PAWN)
    ):
        raise InvalidPositionError("en passant square does not follow a double push")
