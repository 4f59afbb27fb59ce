"""Core rules components: board model, move generation, transformations,
state transitions, win detection, evaluation and search."""

from .board import GameState, Square, Empty, Metamorph, Piece, EMPTY, ascii_board
from .moves import legal_destinations, is_square_attacked
from .transform import sweep
from .rules import new_game, apply_move, resolve_promotion, promotion_available, active_counts
from .win import detect_win, king_in_check
from .candidates import Candidate, generate_moves
from .evaluator import Evaluator
from .search import SearchEngine, select_ai_move
