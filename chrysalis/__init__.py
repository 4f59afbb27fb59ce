"""Chrysalis Chess: rules engine and computer opponent."""

from chrysalis.core import (
    GameState, new_game, apply_move, resolve_promotion, select_ai_move,
    generate_moves, Evaluator, SearchEngine, ascii_board,
)

__all__ = [
    "GameState", "new_game", "apply_move", "resolve_promotion", "select_ai_move",
    "generate_moves", "Evaluator", "SearchEngine", "ascii_board",
]
