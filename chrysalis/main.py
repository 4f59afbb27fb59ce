import random
from typing import List, Optional

import chess

from chrysalis.config import CONFIG
from chrysalis.core.board import Color, GameState
from chrysalis.core.evaluator import Evaluator
from chrysalis.core.moves import legal_destinations
from chrysalis.core.rules import apply_move, new_game, parse_square_ref, resolve_promotion
from chrysalis.core.search import SearchEngine, select_ai_move


class Engine:
    """One in-memory game session: the current state plus the computer player."""

    def __init__(self, depth: Optional[int] = None, level: Optional[str] = None,
                 seed: Optional[int] = None):
        self.rng = random.Random(seed)
        self.search = SearchEngine(Evaluator(), depth=depth, rng=self.rng)
        self.level = level or CONFIG.search.level
        self.state: GameState = new_game(self.rng)

    def reset(self, seed: Optional[int] = None) -> GameState:
        if seed is not None:
            self.rng.seed(seed)
        self.state = new_game(self.rng)
        return self.state

    def make_move(self, from_square: str, to_square: str) -> bool:
        """Play a move; returns False (and keeps the position) if it was rejected."""
        before = self.state
        self.state = apply_move(before, from_square, to_square)
        return self.state.move_number != before.move_number

    def promote(self, choice: str) -> bool:
        before = self.state
        self.state = resolve_promotion(before, choice)
        return before.promotion is not None and self.state.promotion is None

    def ai_move(self, level: Optional[str] = None, color: Optional[Color] = None) -> Optional[str]:
        """Let the computer act for ``color`` (default: the side to move); returns its move as 'e7e6'."""
        before = self.state
        self.state = select_ai_move(before, level=level or self.level, color=color, engine=self.search)
        if self.state.move_number == before.move_number or self.state.last_move is None:
            return None
        lm = self.state.last_move
        return chess.square_name(lm.from_square) + chess.square_name(lm.to_square)

    def legal_moves(self, square: str) -> List[str]:
        index = parse_square_ref(square)
        if index is None:
            return []
        return [chess.square_name(d) for d in legal_destinations(self.state, index)]
