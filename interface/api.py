"""FastAPI REST interface for a single in-memory game session."""

import threading
from typing import Any, Dict, Optional

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from chrysalis.config import CONFIG, LEVELS
from chrysalis.core.board import COLORS, Empty, GameState, Metamorph, color_name, type_letter
from chrysalis.log import setup_logging
from chrysalis.main import Engine

setup_logging(CONFIG.log_level)
app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared session; the state itself is an immutable value swapped under the lock.
engine = Engine(depth=CONFIG.search.depth, level=CONFIG.search.level, seed=CONFIG.search.seed)
_state_lock = threading.Lock()


class MoveRequest(BaseModel):
    from_square: str  # e.g. "e7"
    to_square: str


class PromotionRequest(BaseModel):
    piece: str  # "Q", "R", "B", "N", "K" or "P"


class AIRequest(BaseModel):
    level: Optional[str] = None
    color: Optional[str] = None  # "white" or "black"; defaults to the side to move


class ResetRequest(BaseModel):
    seed: Optional[int] = None


def _counts(pool) -> Dict[str, int]:
    return {type_letter(t): n for t, n in pool.items()}


def snapshot(state: GameState) -> Dict[str, Any]:
    squares = []
    for square in state.squares:
        occ = state.occupants[square.index]
        if isinstance(occ, Empty):
            occupant = None
        elif isinstance(occ, Metamorph):
            occupant = {"kind": "metamorph", "color": color_name(occ.color)}
        else:
            occupant = {
                "kind": "piece",
                "color": color_name(occ.color),
                "type": type_letter(occ.piece_type),
                "born_at_move": occ.born_at_move,
                "must_return": occ.must_return,
                "return_by_move": occ.return_by_move,
            }
        squares.append({
            "id": square.name,
            "file": square.file,
            "rank": square.rank,
            "blue_symbol": type_letter(square.blue_symbol) if square.blue_symbol else None,
            "occupant": occupant,
        })
    lm = state.last_move
    return {
        "squares": squares,
        "turn": color_name(state.turn),
        "move_number": state.move_number,
        "stock": {color_name(c): _counts(state.stock[c]) for c in COLORS},
        "quietus": {color_name(c): _counts(state.quietus[c]) for c in COLORS},
        "king_on_board": {color_name(c): state.king_on_board[c] for c in COLORS},
        "king_protected_until": {color_name(c): state.king_protected_until[c] for c in COLORS},
        "promotion": None if state.promotion is None else {
            "square": chess.square_name(state.promotion.square),
            "color": color_name(state.promotion.color),
        },
        "winner": None if state.winner is None else color_name(state.winner),
        "win_reason": state.win_reason,
        "last_move": None if lm is None else {
            "from": chess.square_name(lm.from_square),
            "to": chess.square_name(lm.to_square),
            "by": color_name(lm.mover),
        },
        "message": state.message,
    }


@app.get("/state")
def get_state():
    with _state_lock:
        return snapshot(engine.state)


@app.get("/moves/{square}")
def get_moves(square: str):
    with _state_lock:
        return {"square": square, "destinations": engine.legal_moves(square)}


@app.post("/move")
def make_move(req: MoveRequest):
    with _state_lock:
        if not engine.make_move(req.from_square, req.to_square):
            raise HTTPException(status_code=400, detail=engine.state.message)
        return snapshot(engine.state)


@app.post("/promote")
def promote(req: PromotionRequest):
    with _state_lock:
        if not engine.promote(req.piece):
            raise HTTPException(status_code=400, detail=engine.state.message)
        return snapshot(engine.state)


@app.post("/ai")
def ai_move(req: AIRequest = AIRequest()):
    if req.level is not None and req.level.lower() not in LEVELS:
        raise HTTPException(status_code=400, detail=f"Unknown level: {req.level}")
    color = None
    if req.color is not None:
        if req.color.lower() not in chess.COLOR_NAMES:
            raise HTTPException(status_code=400, detail=f"Unknown color: {req.color}")
        color = req.color.lower() == "white"
    with _state_lock:
        before = engine.state
        engine.ai_move(level=req.level, color=color)
        if engine.state.move_number == before.move_number and engine.state.promotion == before.promotion:
            raise HTTPException(status_code=400, detail=engine.state.message)
        return snapshot(engine.state)


@app.post("/reset")
def reset(req: ResetRequest = ResetRequest()):
    with _state_lock:
        engine.reset(seed=req.seed)
        return snapshot(engine.state)
