"""Terminal conditions, judged from the side that just moved.

The checkmate test looks only at the king's own escape
squares; blocking or capturing the checker with another unit is not
considered.
"""
from dataclasses import dataclass
from typing import Optional

import chess

from chrysalis.core.board import COLORS, Color, GameState, Metamorph, Piece
from chrysalis.core.moves import (
    attacked_squares, is_square_attacked, metamorph_destinations, piece_destinations,
)

KING_CAPTURED = "king captured"
CHECKMATE = "checkmate"
IMMOBILE = "no king + no mobile pawns/metamorphs"


@dataclass(frozen=True)
class WinResult:
    winner: Color
    reason: str


def king_in_check(state: GameState, color: Color) -> bool:
    if not state.king_on_board[color]:
        return False
    king_sq = state.find_king(color)
    if king_sq is None:
        return False
    return is_square_attacked(state, king_sq, not color)


def is_immobilised(state: GameState, color: Color) -> bool:
    """No king, and every pawn and metamorph of ``color`` is stuck (or absent)."""
    if state.king_on_board[color]:
        return False
    for index, occ in state.iter_occupied():
        if occ.color != color:
            continue
        if isinstance(occ, Metamorph) and metamorph_destinations(state, index):
            return False
        if isinstance(occ, Piece) and occ.piece_type == chess.PAWN and piece_destinations(state, index):
            return False
    return True


def is_checkmated(state: GameState, color: Color) -> bool:
    if not state.king_on_board[color]:
        return False
    king_sq = state.find_king(color)
    if king_sq is None:
        return False
    attacked = attacked_squares(state, not color)
    if king_sq not in attacked:
        return False
    return all(dest in attacked for dest in piece_destinations(state, king_sq))


def detect_win(state: GameState, last_mover: Color, king_captured: bool = False) -> Optional[WinResult]:
    if king_captured:
        return WinResult(last_mover, KING_CAPTURED)
    if is_checkmated(state, not last_mover):
        return WinResult(last_mover, CHECKMATE)
    for color in COLORS:
        if is_immobilised(state, color):
            return WinResult(not color, IMMOBILE)
    return None
