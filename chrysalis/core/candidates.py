"""Candidate moves for one side, as successor states.

Every geometrically legal move is played out on the current position
(pending promotions of the mover resolved Q > R > B > N > K) and rejected
moves are dropped. Moves that leave the mover's king attacked are filtered
out; a side already under attack only gets the escaping moves, otherwise
the unfiltered list is the fallback when nothing safe exists.
"""
from dataclasses import dataclass, replace
from typing import List

import chess

from chrysalis.core.board import Color, GameState
from chrysalis.core.moves import legal_destinations
from chrysalis.core.rules import apply_move, promotion_available, resolve_promotion
from chrysalis.core.win import king_in_check

PROMOTION_PREFERENCE = (chess.QUEEN, chess.ROOK, chess.BISHOP, chess.KNIGHT, chess.KING)


@dataclass(frozen=True)
class Candidate:
    from_square: int
    to_square: int
    next_state: GameState

    @property
    def uci(self) -> str:
        return chess.square_name(self.from_square) + chess.square_name(self.to_square)


def auto_promote(state: GameState, color: Color) -> GameState:
    """Resolve ``color``'s pending promotion with the first type under its cap."""
    for piece_type in PROMOTION_PREFERENCE:
        if promotion_available(state, color, piece_type):
            return resolve_promotion(state, piece_type)
    return state


def generate_moves(state: GameState, color: Color) -> List[Candidate]:
    base = replace(state, turn=color, message=None)
    candidates = []
    for index, occ in base.iter_occupied():
        if occ.color != color:
            continue
        for dest in legal_destinations(base, index):
            nxt = apply_move(base, index, dest)
            if nxt.move_number == base.move_number:
                continue  # rejected
            if nxt.promotion is not None and nxt.promotion.color == color and not nxt.is_over:
                nxt = auto_promote(nxt, color)
            candidates.append(Candidate(index, dest, nxt))

    safe = [c for c in candidates if not king_in_check(c.next_state, color)]
    if king_in_check(state, color):
        return safe
    return safe or candidates
