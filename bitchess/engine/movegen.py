from __future__ import annotations

from typing import Callable, Dict, List, NamedTuple

from .attacks import PAWN_ATTACKS, PIECE_ATTACKS, is_attacked
from .move import Move
from .squares import iter_bits
from .state import GameState
from .types import PROMOTION_TYPES, CastlingRights, Color, MoveFlag, PieceType


class CastleSpec(NamedTuple):
    right: CastlingRights
    flag: MoveFlag
    king_from: int
    king_to: int
    rook_from: int
    rook_to: int
    between: int  # squares that must be empty
    king_path: tuple  # squares the king crosses or lands on, must not be attacked


def _castle_spec(color: Color, kingside: bool) -> CastleSpec:
    base = 0 if color is Color.WHITE else 56
    if kingside:
        right = (
            CastlingRights.WHITE_KINGSIDE if color is Color.WHITE else CastlingRights.BLACK_KINGSIDE
        )
        between = (1 << (base + 5)) | (1 << (base + 6))
        return CastleSpec(
            right, MoveFlag.CASTLE_KINGSIDE, base + 4, base + 6, base + 7, base + 5, between,
            (base + 5, base + 6),
        )
    right = (
        CastlingRights.WHITE_QUEENSIDE if color is Color.WHITE else CastlingRights.BLACK_QUEENSIDE
    )
    between = (1 << (base + 1)) | (1 << (base + 2)) | (1 << (base + 3))
    return CastleSpec(
        right, MoveFlag.CASTLE_QUEENSIDE, base + 4, base + 2, base + 0, base + 3, between,
        (base + 3, base + 2),
    )


CASTLE_SPECS: Dict[Color, tuple] = {
    color: (_castle_spec(color, True), _castle_spec(color, False)) for color in Color
}
CASTLE_BY_FLAG: Dict[tuple, CastleSpec] = {
    (color, spec.flag): spec for color, specs in CASTLE_SPECS.items() for spec in specs
}

# Squares whose rook leaving or being captured forfeits a castling right.
ROOK_HOME_RIGHTS: Dict[int, CastlingRights] = {
    spec.rook_from: spec.right for specs in CASTLE_SPECS.values() for spec in specs
}


def _captured_type(state: GameState, sq: int, enemy: Color) -> PieceType:
    bb = state.board.bb
    mask = 1 << sq
    base = enemy * 6
    for piece in PieceType:
        if bb[base + piece] & mask:
            return piece
    raise AssertionError(f"no {enemy.name} piece on capture square {sq}")


def _pawn_moves(state: GameState, color: Color, moves: List[Move]) -> None:
    board = state.board
    occ_all = board.occ_all
    enemy = color.opponent
    enemy_occ = board.occ[enemy]
    if color is Color.WHITE:
        step, home_rank, last_rank = 8, 1, 7
    else:
        step, home_rank, last_rank = -8, 6, 0
    ep = state.ep_square
    ep_mask = (1 << ep) if ep is not None else 0
    attacks = PAWN_ATTACKS[color]

    for from_sq in iter_bits(board.bb[color * 6 + PieceType.PAWN]):
        to_sq = from_sq + step
        if not (occ_all >> to_sq) & 1:
            if to_sq >> 3 == last_rank:
                for promo in PROMOTION_TYPES:
                    moves.append(Move(from_sq, to_sq, PieceType.PAWN, promotion=promo))
            else:
                moves.append(Move(from_sq, to_sq, PieceType.PAWN))
                to2 = to_sq + step
                if from_sq >> 3 == home_rank and not (occ_all >> to2) & 1:
                    moves.append(
                        Move(from_sq, to2, PieceType.PAWN, flag=MoveFlag.DOUBLE_PUSH)
                    )

        targets = attacks[from_sq]
        for cap in iter_bits(targets & enemy_occ):
            captured = _captured_type(state, cap, enemy)
            if cap >> 3 == last_rank:
                for promo in PROMOTION_TYPES:
                    moves.append(Move(from_sq, cap, PieceType.PAWN, captured, promo))
            else:
                moves.append(Move(from_sq, cap, PieceType.PAWN, captured))
        if targets & ep_mask:
            moves.append(
                Move(from_sq, ep, PieceType.PAWN, PieceType.PAWN, flag=MoveFlag.EN_PASSANT)
            )


def _piece_moves(piece: PieceType) -> Callable[[GameState, Color, List[Move]], None]:
    attack = PIECE_ATTACKS[piece]

    def generate(state: GameState, color: Color, moves: List[Move]) -> None:
        board = state.board
        occ_all = board.occ_all
        own = board.occ[color]
        enemy = color.opponent
        enemy_occ = board.occ[enemy]
        for from_sq in iter_bits(board.bb[color * 6 + piece]):
            for to_sq in iter_bits(attack(from_sq, occ_all, color) & ~own):
                if (enemy_occ >> to_sq) & 1:
                    captured = _captured_type(state, to_sq, enemy)
                    moves.append(Move(from_sq, to_sq, piece, captured))
                else:
                    moves.append(Move(from_sq, to_sq, piece))

    return generate


def castling_moves(state: GameState, color: Color) -> List[Move]:
    """Castling candidates for ``color``.

    A held right is only the first condition: king and rook must still stand
    on their home squares, the squares between them must be empty, and the
    king may not start on, cross, or land on an attacked square.
    """
    board = state.board
    rights = state.castling
    enemy = color.opponent
    king = board.bb[color * 6 + PieceType.KING]
    rooks = board.bb[color * 6 + PieceType.ROOK]
    out: List[Move] = []
    checked = False
    for spec in CASTLE_SPECS[color]:
        if not rights & spec.right:
            continue
        if not (king >> spec.king_from) & 1 or not (rooks >> spec.rook_from) & 1:
            continue
        if board.occ_all & spec.between:
            continue
        if not checked:
            if is_attacked(board, spec.king_from, enemy):
                return out
            checked = True
        if any(is_attacked(board, sq, enemy) for sq in spec.king_path):
            continue
        out.append(Move(spec.king_from, spec.king_to, PieceType.KING, flag=spec.flag))
    return out


_king_steps = _piece_moves(PieceType.KING)


def _king_moves(state: GameState, color: Color, moves: List[Move]) -> None:
    _king_steps(state, color, moves)
    if state.castling & CastlingRights.for_color(color):
        moves.extend(castling_moves(state, color))


MoveGenFn = Callable[[GameState, Color, List[Move]], None]

GENERATORS: Dict[PieceType, MoveGenFn] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.KNIGHT: _piece_moves(PieceType.KNIGHT),
    PieceType.BISHOP: _piece_moves(PieceType.BISHOP),
    PieceType.ROOK: _piece_moves(PieceType.ROOK),
    PieceType.QUEEN: _piece_moves(PieceType.QUEEN),
    PieceType.KING: _king_moves,
}


def generate_pseudo_legal(state: GameState) -> List[Move]:
    """Return pseudo-legal moves for the side to move.

    Moves obey each piece's movement rules but may leave the mover's own
    king in check; :func:`bitchess.engine.legality.filter_legal` removes those.
    Castling candidates are the exception: their attacked-square conditions
    are already enforced here.
    """
    color = state.side_to_move
    moves: List[Move] = []
    for piece in PieceType:
        GENERATORS[piece](state, color, moves)
    return moves
