import argparse
from typing import List, Optional

import chess

from chrysalis.config import CONFIG, LEVELS
from chrysalis.core.board import ascii_board, color_name
from chrysalis.log import setup_logging
from chrysalis.main import Engine

HELP = "Moves: 'e7 e6' or 'e7e6'. Promotion: 'Q', 'R', 'B', 'N', 'K'. 'quit' to leave."


def _split_move(text: str) -> Optional[List[str]]:
    parts = text.split()
    if len(parts) == 1 and len(parts[0]) == 4:
        parts = [parts[0][:2], parts[0][2:]]
    return parts if len(parts) == 2 else None


def play(engine: Engine, cpu: Optional[str], input_fn=input, output_fn=print) -> int:
    """Terminal game loop. ``cpu`` is the color the computer plays, or None for hot-seat."""
    output_fn(HELP)
    while True:
        state = engine.state
        output_fn(ascii_board(state))
        if state.message:
            output_fn(state.message)
        if state.is_over:
            return 0

        if state.promotion is not None:
            mover = color_name(state.promotion.color)
        else:
            mover = color_name(state.turn)

        if cpu == mover:
            move = engine.ai_move(color=chess.WHITE if cpu == "white" else chess.BLACK)
            if move is None and engine.state.promotion == state.promotion:
                output_fn("Computer has no move.")
                return 0
            output_fn(f"Computer plays: {move or 'promotion'}")
            continue

        prompt = f"{mover} to promote: " if state.promotion is not None else f"{mover} move {state.move_number}: "
        text = input_fn(prompt).strip()
        if text in ("quit", "exit"):
            return 0
        if state.promotion is not None:
            engine.promote(text.upper())
            continue
        squares = _split_move(text)
        if squares is None:
            output_fn(HELP)
            continue
        engine.make_move(*squares)


def main(argv: Optional[list] = None) -> int:
    ap = argparse.ArgumentParser(prog="chrysalis")
    default_cpu = CONFIG.search.cpu_plays if CONFIG.search.mode == "cpu" else "none"
    ap.add_argument("--cpu", choices=["white", "black", "none"], default=default_cpu)
    ap.add_argument("--level", choices=list(LEVELS), default=CONFIG.search.level)
    ap.add_argument("--depth", type=int, default=CONFIG.search.depth)
    ap.add_argument("--seed", type=int, default=CONFIG.search.seed)
    ap.add_argument("--log-level", default=CONFIG.log_level)
    args = ap.parse_args(argv)

    setup_logging(args.log_level)
    engine = Engine(depth=args.depth, level=args.level, seed=args.seed)
    cpu = None if args.cpu == "none" else args.cpu
    return play(engine, cpu)


if __name__ == "__main__":
    raise SystemExit(main())
