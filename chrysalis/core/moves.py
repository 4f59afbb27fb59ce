"""Legal-destination generation.

Metamorphs have a single candidate: one step forward onto an empty square.
Differentiated pieces use chess geometry (no double step, en passant or
castling) and, unless they are on a promotion loan, may only land inside
the chrysalis zone. Pawns keep their own forward/diagonal rule everywhere so
they can reach the promotion rank.

"Attacked" throughout the engine means "a legal destination of some enemy
differentiated piece".
"""
from typing import List, Set

import chess

from chrysalis.core.board import (
    Color, Empty, FORWARD, GameState, Metamorph, Piece,
    file_of, in_zone, rank_of, square_at,
)

ROOK_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))
BISHOP_DIRS = ((1, 1), (1, -1), (-1, 1), (-1, -1))

SLIDER_DIRS = {
    chess.ROOK: ROOK_DIRS,
    chess.BISHOP: BISHOP_DIRS,
    chess.QUEEN: ROOK_DIRS + BISHOP_DIRS,
}

# python-chess precomputed leaper tables, indexed by square
STEP_ATTACKS = {
    chess.KNIGHT: chess.BB_KNIGHT_ATTACKS,
    chess.KING: chess.BB_KING_ATTACKS,
}


def metamorph_destinations(state: GameState, index: int) -> List[int]:
    occ = state.occupant_at(index)
    if not isinstance(occ, Metamorph):
        return []
    dest = square_at(file_of(index), rank_of(index) + FORWARD[occ.color])
    if dest is None or not isinstance(state.occupants[dest], Empty):
        return []
    return [dest]


def _can_land(state: GameState, dest: int, color: Color, zone_bound: bool) -> bool:
    if zone_bound and not in_zone(dest):
        return False
    target = state.occupants[dest]
    return isinstance(target, Empty) or (isinstance(target, Piece) and target.color != color)


def _pawn_destinations(state: GameState, index: int, color: Color) -> List[int]:
    file, rank = file_of(index), rank_of(index) + FORWARD[color]
    moves = []
    ahead = square_at(file, rank)
    if ahead is not None and isinstance(state.occupants[ahead], Empty):
        moves.append(ahead)
    for df in (-1, 1):
        dest = square_at(file + df, rank)
        if dest is None:
            continue
        target = state.occupants[dest]
        if isinstance(target, Piece) and target.color != color:
            moves.append(dest)
    return moves


def _slider_destinations(state: GameState, index: int, piece: Piece, zone_bound: bool) -> List[int]:
    moves = []
    for df, dr in SLIDER_DIRS[piece.piece_type]:
        file, rank = file_of(index) + df, rank_of(index) + dr
        while True:
            dest = square_at(file, rank)
            if dest is None or (zone_bound and not in_zone(dest)):
                break
            target = state.occupants[dest]
            if isinstance(target, Empty):
                moves.append(dest)
            else:
                if isinstance(target, Piece) and target.color != piece.color:
                    moves.append(dest)
                break
            file += df
            rank += dr
    return moves


def piece_destinations(state: GameState, index: int) -> List[int]:
    occ = state.occupant_at(index)
    if not isinstance(occ, Piece):
        return []
    zone_bound = not occ.must_return
    if occ.piece_type == chess.PAWN:
        return _pawn_destinations(state, index, occ.color)
    if occ.piece_type in STEP_ATTACKS:
        targets = chess.SquareSet(STEP_ATTACKS[occ.piece_type][index])
        return [d for d in targets if _can_land(state, d, occ.color, zone_bound)]
    return _slider_destinations(state, index, occ, zone_bound)


def legal_destinations(state: GameState, index: int) -> List[int]:
    """Destinations for whatever occupies ``index`` (empty -> no moves)."""
    occ = state.occupant_at(index)
    if isinstance(occ, Metamorph):
        return metamorph_destinations(state, index)
    if isinstance(occ, Piece):
        return piece_destinations(state, index)
    return []


def attacked_squares(state: GameState, by_color: Color) -> Set[int]:
    attacked: Set[int] = set()
    for index, occ in state.iter_occupied():
        if isinstance(occ, Piece) and occ.color == by_color:
            attacked.update(piece_destinations(state, index))
    return attacked


def is_square_attacked(state: GameState, index: int, by_color: Color) -> bool:
    for origin, occ in state.iter_occupied():
        if isinstance(occ, Piece) and occ.color == by_color:
            if index in piece_destinations(state, origin):
                return True
    return False
