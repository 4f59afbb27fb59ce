import chess

from chrysalis.config import CONFIG
from chrysalis.core.board import Color, GameState, Piece, in_zone
from chrysalis.core.candidates import generate_moves


class Evaluator:
    def __init__(self, cfg=None):
        self.cfg = cfg or CONFIG.eval
        # Map piece type to its configured weight, e.g. chess.KNIGHT -> cfg["KNIGHT"]
        self.values = {pt: self.cfg.piece_values[chess.piece_name(pt).upper()]
                       for pt in chess.PIECE_TYPES}

    def evaluate(self, state: GameState, for_color: Color) -> float:
        """Score ``state`` from ``for_color``'s point of view.

        Decided games saturate at +/- win_score. Otherwise: material, a small
        bonus per piece standing in the chrysalis zone, and half a point per
        candidate move of difference in mobility.
        """
        if state.winner is not None:
            return self.cfg.win_score if state.winner == for_color else -self.cfg.win_score

        score = 0.0
        for index, occ in state.iter_occupied():
            if not isinstance(occ, Piece):
                continue
            sign = 1 if occ.color == for_color else -1
            score += sign * self.values[occ.piece_type]
            if in_zone(index):
                score += sign * self.cfg.zone_bonus

        mine = len(generate_moves(state, for_color))
        theirs = len(generate_moves(state, not for_color))
        score += (mine - theirs) * self.cfg.mobility_weight
        return score
