import random
import time
from typing import List, Optional

from loguru import logger

from chrysalis.config import CONFIG, LEVELS
from chrysalis.core.board import Color, GameState, color_name
from chrysalis.core.candidates import Candidate, auto_promote, generate_moves
from chrysalis.core.evaluator import Evaluator
from chrysalis.errors import SearchError

INF = float("inf")


class SearchEngine:
    """Move selection for the computer player.

    easy   -- uniform random candidate
    medium -- one-ply greedy on the evaluator
    hard   -- minimax with alpha-beta, ``max_depth`` reply plies deep
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, depth: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        self.evaluator = evaluator or Evaluator()
        self.max_depth = CONFIG.search.depth if depth is None else depth
        self.rng = rng or random.Random(CONFIG.search.seed)
        self.nodes = 0

    def select(self, state: GameState, color: Optional[Color] = None,
               level: Optional[str] = None) -> Candidate:
        color = state.turn if color is None else color
        level = (level or CONFIG.search.level).lower()
        if level not in LEVELS:
            raise ValueError(f"Unknown AI level {level!r}; expected one of {LEVELS}")
        if state.is_over:
            raise SearchError("Game is already over")

        moves = generate_moves(state, color)
        if not moves:
            raise SearchError(f"{color_name(color)} has no move")

        self.nodes = 0
        start_time = time.time()
        if level == "easy":
            best, score = self.rng.choice(moves), None
        elif level == "medium":
            best, score = self._greedy(moves, color)
        else:
            best, score = self._minimax_root(moves, color)

        logger.debug("{} ({}) plays {} score {} nodes {} time {:.2f}s",
                     color_name(color), level, best.uci, score, self.nodes,
                     time.time() - start_time)
        return best

    def _greedy(self, moves: List[Candidate], color: Color):
        best_score = -INF
        best = moves[0]
        for move in moves:
            self.nodes += 1
            score = self.evaluator.evaluate(move.next_state, color)
            if score > best_score:
                best_score = score
                best = move
        return best, best_score

    def _minimax_root(self, moves: List[Candidate], color: Color):
        best_score = -INF
        best = moves[0]
        for move in moves:
            # strict > keeps the first of equally scored candidates
            score = self._minimax(move.next_state, self.max_depth, best_score, INF, False, color)
            if score > best_score:
                best_score = score
                best = move
        return best, best_score

    def _minimax(self, state: GameState, depth: int, alpha: float, beta: float,
                 maximizing: bool, max_color: Color) -> float:
        self.nodes += 1
        if depth <= 0 or state.is_over:
            return self.evaluator.evaluate(state, max_color)

        side = max_color if maximizing else not max_color
        replies = generate_moves(state, side)
        if not replies:
            return self.evaluator.evaluate(state, max_color)

        if maximizing:
            value = -INF
            for reply in replies:
                value = max(value, self._minimax(reply.next_state, depth - 1, alpha, beta, False, max_color))
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return value

        value = INF
        for reply in replies:
            value = min(value, self._minimax(reply.next_state, depth - 1, alpha, beta, True, max_color))
            beta = min(beta, value)
            if beta <= alpha:
                break
        return value


def select_ai_move(state: GameState, level: Optional[str] = None, color: Optional[Color] = None,
                   engine: Optional[SearchEngine] = None) -> GameState:
    """Let the computer act for ``color`` (default: the side to move).

    Resolves the computer's own pending promotion first; otherwise plays the
    move chosen at ``level``. A finished game, a side that is not to move
    or a side without moves comes back unchanged with a message.
    """
    color = state.turn if color is None else color
    if state.is_over:
        return state.with_message("The game is over.")
    if state.promotion is not None and state.promotion.color == color:
        return auto_promote(state, color)
    if color != state.turn:
        return state.with_message(f"It is {color_name(state.turn)}'s turn.")
    engine = engine or SearchEngine()
    try:
        choice = engine.select(state, color=color, level=level)
    except SearchError as exc:
        logger.debug("AI has nothing to play: {}", exc)
        return state.with_message(str(exc))
    return choice.next_state
