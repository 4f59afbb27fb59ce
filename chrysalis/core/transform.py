"""Transformation engine.

Every zone square carries a hidden blue symbol. Whenever the board settles
(after a move or a promotion choice) each such square is visited once: a
metamorph standing on it becomes a piece of that type, and a piece of a
different type is swapped for one, provided the owner's chrysalis stock
still holds that type. Swapping a piece returns its old type to stock,
clamped at the initial count.

This is one sweep per trigger, not a fixed-point iteration.
"""
import chess
from loguru import logger

from chrysalis.core.board import (
    BB_ZONE, INITIAL_COUNTS, GameState, Metamorph, Piece,
    color_name, in_zone, type_letter,
)


def transform_square(state: GameState, index: int, protect_until: int) -> bool:
    """Apply the blue-symbol rule to one square of a working copy.

    Mutates ``state``; callers pass a copy they own. A king created here is
    shielded from capture while ``move_number == protect_until``.
    Returns True when the occupant changed.
    """
    needed = state.square(index).blue_symbol
    if needed is None or not in_zone(index):
        return False
    occ = state.occupants[index]
    if isinstance(occ, Metamorph):
        color = occ.color
        if state.stock[color][needed] <= 0:
            return False
    elif isinstance(occ, Piece):
        color = occ.color
        current = occ.piece_type
        if current == needed or state.stock[color][needed] <= 0:
            return False
        state.stock[color][current] = min(INITIAL_COUNTS[current], state.stock[color][current] + 1)
        if current == chess.KING:
            state.king_on_board[color] = False
    else:
        return False

    state.stock[color][needed] -= 1
    # fresh piece: any loan flags of the previous occupant are gone
    state.set_occupant(index, Piece(color, needed, born_at_move=state.move_number))
    if needed == chess.KING:
        state.king_on_board[color] = True
        state.king_protected_until[color] = protect_until
    logger.debug("{} {} transforms into {} on {}", color_name(color),
                 type(occ).__name__.lower(), type_letter(needed), chess.square_name(index))
    return True


def sweep_in_place(state: GameState) -> int:
    """Run the sweep over a working copy; returns the number of transforms."""
    changed = 0
    for index in chess.SquareSet(BB_ZONE):
        if transform_square(state, index, protect_until=state.move_number):
            changed += 1
    return changed


def sweep(state: GameState) -> GameState:
    """Pure variant of :func:`sweep_in_place`."""
    work = state.copy()
    sweep_in_place(work)
    return work
