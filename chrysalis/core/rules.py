"""State transitions: game setup, moves and promotion choices.

``apply_move`` and ``resolve_promotion`` are the only functions that produce
a successor state. They never modify their argument and never raise for
bad user input; a rejected request comes back as the same position with
``message`` explaining why.
"""
import random
from typing import Dict, Optional, Union

import chess
from loguru import logger

from chrysalis.core.board import (
    BB_ZONE, COLORS, EMPTY, HOME_RANKS, INITIAL_COUNTS, PIECE_ORDER, PROMOTION_RANK,
    Color, Empty, GameState, LastMove, Metamorph, PendingPromotion, Piece, PieceType,
    color_name, in_zone, parse_piece_type, rank_of, square_at, type_letter,
)
from chrysalis.core.moves import legal_destinations
from chrysalis.core.transform import sweep_in_place, transform_square
from chrysalis.core.win import detect_win

SquareRef = Union[str, int]


def new_game(rng: Optional[random.Random] = None) -> GameState:
    """Fresh game: shuffled blue symbols on ranks 3-6, metamorphs at home."""
    rng = rng or random.Random()
    bag = [t for t in PIECE_ORDER for _ in range(INITIAL_COUNTS[t] * 2)]
    rng.shuffle(bag)
    symbols = dict(zip(chess.SquareSet(BB_ZONE), bag))
    state = GameState.empty(symbols)
    for color in COLORS:
        for rank in HOME_RANKS[color]:
            for file in range(8):
                state.set_occupant(square_at(file, rank), Metamorph(color))
    return state


def active_counts(state: GameState, color: Color) -> Dict[PieceType, int]:
    counts = {t: 0 for t in PIECE_ORDER}
    for _, occ in state.iter_occupied():
        if isinstance(occ, Piece) and occ.color == color:
            counts[occ.piece_type] += 1
    return counts


def promotion_available(state: GameState, color: Color, piece_type: PieceType) -> bool:
    return active_counts(state, color)[piece_type] < INITIAL_COUNTS[piece_type]


def parse_square_ref(ref: SquareRef) -> Optional[int]:
    """'e4' or a square index -> square index; None if it names no square."""
    if isinstance(ref, bool):
        return None
    if isinstance(ref, int):
        return ref if 0 <= ref < 64 else None
    try:
        return chess.parse_square(ref)
    except ValueError:
        return None


def _reject(state: GameState, message: str) -> GameState:
    logger.debug("Rejected: {}", message)
    return state.with_message(message)


def _finish(state: GameState, last_mover: Color, king_captured: bool = False) -> None:
    result = detect_win(state, last_mover, king_captured)
    if result is None:
        return
    state.winner = result.winner
    state.win_reason = result.reason
    state.message = f"Winner: {color_name(result.winner)} ({result.reason})"
    logger.info("Game over at move {}: {} wins by {}",
                state.move_number, color_name(result.winner), result.reason)


def _expire_loans(state: GameState, just_moved: Color) -> None:
    for index, occ in list(state.iter_occupied()):
        if not (isinstance(occ, Piece) and occ.must_return and occ.return_by_move is not None):
            continue
        if occ.color != just_moved or state.move_number < occ.return_by_move:
            continue
        if in_zone(index):
            state.set_occupant(index, occ.settled())
            continue
        # an unreturned loan vanishes; it goes back to no pool
        if occ.piece_type == chess.KING:
            state.king_on_board[occ.color] = False
        state.set_occupant(index, EMPTY)
        logger.debug("Loan {} on {} expired", occ.symbol(), chess.square_name(index))


def apply_move(state: GameState, from_square: SquareRef, to_square: SquareRef) -> GameState:
    if state.is_over:
        return _reject(state, "The game is over.")
    src = parse_square_ref(from_square)
    dst = parse_square_ref(to_square)
    if src is None or dst is None:
        return _reject(state, "Unknown square.")
    mover = state.occupant_at(src)
    if isinstance(mover, Empty):
        return _reject(state, "There is nothing to move on that square.")
    if mover.color != state.turn:
        return _reject(state, f"It is {color_name(state.turn)}'s turn.")
    if state.promotion is not None and state.promotion.color == mover.color:
        return _reject(state, "Choose a promotion piece first.")
    if dst not in legal_destinations(state, src):
        return _reject(state, "Illegal move.")

    target = state.occupant_at(dst)
    if isinstance(target, Piece) and target.piece_type == chess.KING:
        if not state.king_on_board[mover.color]:
            return _reject(state, "You cannot take the king without your own king on the board.")
        if state.king_protected_until[target.color] == state.move_number:
            return _reject(state, "That king is protected this turn.")

    nxt = state.copy()
    king_captured = False
    if isinstance(target, Piece):
        nxt.quietus[target.color][target.piece_type] += 1
        if target.piece_type == chess.KING:
            nxt.king_on_board[target.color] = False
            king_captured = True
        if nxt.promotion is not None and nxt.promotion.square == dst:
            nxt.promotion = None

    landed = mover
    if isinstance(landed, Piece) and landed.must_return and in_zone(dst):
        landed = landed.settled()
    nxt.set_occupant(dst, landed)
    nxt.set_occupant(src, EMPTY)
    nxt.last_move = LastMove(src, dst, mover.color)

    transform_square(nxt, dst, protect_until=nxt.move_number + 1)

    landed = nxt.occupant_at(dst)
    if (isinstance(landed, Piece) and landed.piece_type == chess.PAWN
            and rank_of(dst) == PROMOTION_RANK[landed.color]):
        nxt.promotion = PendingPromotion(dst, landed.color)

    nxt.turn = not nxt.turn
    nxt.move_number += 1
    _expire_loans(nxt, just_moved=mover.color)
    sweep_in_place(nxt)
    nxt.message = None
    _finish(nxt, mover.color, king_captured)
    return nxt


def resolve_promotion(state: GameState, choice: Union[str, PieceType]) -> GameState:
    """Turn the pawn awaiting promotion into a loan piece of ``choice``.

    ``choice`` is a letter ('Q') or a python-chess piece type. The piece is
    revived from the quietus when one is there, otherwise made fresh, and
    must be back on ranks 3-6 by ``move_number + 1``.
    """
    if state.is_over:
        return _reject(state, "The game is over.")
    if state.promotion is None:
        return _reject(state, "There is no promotion to resolve.")
    if isinstance(choice, str):
        piece_type = parse_piece_type(choice)
    else:
        piece_type = choice if choice in PIECE_ORDER else None
    if piece_type is None:
        return _reject(state, "Unknown piece type.")
    color = state.promotion.color
    if not promotion_available(state, color, piece_type):
        return _reject(state, "You can't promote to that piece right now.")

    nxt = state.copy()
    if nxt.quietus[color][piece_type] > 0:
        nxt.quietus[color][piece_type] -= 1
    deadline = nxt.move_number + 1
    nxt.set_occupant(state.promotion.square, Piece(
        color, piece_type, born_at_move=nxt.move_number,
        must_return=True, return_by_move=deadline,
    ))
    if piece_type == chess.KING:
        nxt.king_on_board[color] = True
        nxt.king_protected_until[color] = deadline
    logger.debug("{} promotes to {} on {}", color_name(color), type_letter(piece_type),
                 chess.square_name(state.promotion.square))
    nxt.promotion = None
    nxt.message = None
    sweep_in_place(nxt)
    _finish(nxt, color)
    return nxt
