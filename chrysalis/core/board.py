"""Board and game-state model for Chrysalis Chess.

Colors and piece types reuse python-chess vocabulary (``chess.WHITE``,
``chess.KNIGHT`` ...) and squares are python-chess square indices, so
``chess.parse_square("e4")`` and ``chess.square_name`` translate to and
from the ``a1``..``h8`` identifiers the UI speaks.

A square's occupant is one of three frozen variants: ``Empty``,
``Metamorph`` or ``Piece``. ``GameState`` is treated as a value: rule
functions copy it before changing anything and hand back the copy.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Tuple, Union

import chess

from chrysalis.errors import BoardInvariantError

Color = chess.Color
PieceType = chess.PieceType

COLORS: Tuple[Color, Color] = (chess.WHITE, chess.BLACK)

# K, Q, R, B, N, P
PIECE_ORDER: Tuple[PieceType, ...] = (
    chess.KING, chess.QUEEN, chess.ROOK, chess.BISHOP, chess.KNIGHT, chess.PAWN,
)

INITIAL_COUNTS: Dict[PieceType, int] = {
    chess.KING: 1,
    chess.QUEEN: 1,
    chess.ROOK: 2,
    chess.BISHOP: 2,
    chess.KNIGHT: 2,
    chess.PAWN: 8,
}

# Chrysalis zone: ranks 3..6
BB_ZONE: int = chess.BB_RANK_3 | chess.BB_RANK_4 | chess.BB_RANK_5 | chess.BB_RANK_6

HOME_RANKS: Dict[Color, Tuple[int, int]] = {chess.WHITE: (7, 8), chess.BLACK: (1, 2)}
FORWARD: Dict[Color, int] = {chess.WHITE: -1, chess.BLACK: 1}
PROMOTION_RANK: Dict[Color, int] = {chess.WHITE: 1, chess.BLACK: 8}


def rank_of(index: int) -> int:
    """Rank 1..8 of a square index."""
    return chess.square_rank(index) + 1


def file_of(index: int) -> int:
    return chess.square_file(index)


def in_zone(index: int) -> bool:
    return bool(BB_ZONE & chess.BB_SQUARES[index])


def square_at(file: int, rank: int) -> Optional[int]:
    """Square index for file 0..7 / rank 1..8, or None off the board."""
    if 0 <= file < 8 and 1 <= rank <= 8:
        return chess.square(file, rank - 1)
    return None


def color_name(color: Color) -> str:
    return chess.COLOR_NAMES[color]


def type_letter(piece_type: PieceType) -> str:
    return chess.piece_symbol(piece_type).upper()


def parse_piece_type(letter: str) -> Optional[PieceType]:
    """'Q' / 'q' -> chess.QUEEN; None for anything else."""
    if not isinstance(letter, str) or len(letter) != 1:
        return None
    symbol = letter.lower()
    if symbol not in chess.PIECE_SYMBOLS[1:]:
        return None
    return chess.PIECE_SYMBOLS.index(symbol)


def full_stock() -> Dict[PieceType, int]:
    return dict(INITIAL_COUNTS)


def empty_pool() -> Dict[PieceType, int]:
    return {t: 0 for t in PIECE_ORDER}


# --- occupants ---

@dataclass(frozen=True)
class Empty:
    pass


EMPTY = Empty()


@dataclass(frozen=True)
class Metamorph:
    color: Color

    def symbol(self) -> str:
        return "M" if self.color == chess.WHITE else "m"


@dataclass(frozen=True)
class Piece:
    color: Color
    piece_type: PieceType
    born_at_move: int
    must_return: bool = False
    return_by_move: Optional[int] = None

    def settled(self) -> "Piece":
        """The same piece with its loan flags cleared."""
        return replace(self, must_return=False, return_by_move=None)

    def symbol(self) -> str:
        return chess.Piece(self.piece_type, self.color).symbol()


Occupant = Union[Empty, Metamorph, Piece]


# --- squares ---

@dataclass(frozen=True)
class Square:
    index: int
    blue_symbol: Optional[PieceType] = None

    @property
    def name(self) -> str:
        return chess.square_name(self.index)

    @property
    def file(self) -> int:
        return file_of(self.index)

    @property
    def rank(self) -> int:
        return rank_of(self.index)


def build_squares(symbols: Optional[Dict[int, PieceType]] = None) -> Tuple[Square, ...]:
    """The fixed 64-square topology with blue symbols on zone squares."""
    symbols = symbols or {}
    for index in symbols:
        if not in_zone(index):
            raise BoardInvariantError(
                f"Blue symbol on {chess.square_name(index)} outside ranks 3-6"
            )
    return tuple(Square(i, symbols.get(i)) for i in chess.SQUARES)


@dataclass(frozen=True)
class PendingPromotion:
    square: int
    color: Color


@dataclass(frozen=True)
class LastMove:
    from_square: int
    to_square: int
    mover: Color


@dataclass
class GameState:
    squares: Tuple[Square, ...]
    occupants: List[Occupant]
    turn: Color = chess.WHITE
    move_number: int = 1
    stock: Dict[Color, Dict[PieceType, int]] = field(
        default_factory=lambda: {c: full_stock() for c in COLORS})
    quietus: Dict[Color, Dict[PieceType, int]] = field(
        default_factory=lambda: {c: empty_pool() for c in COLORS})
    king_on_board: Dict[Color, bool] = field(
        default_factory=lambda: {c: False for c in COLORS})
    king_protected_until: Dict[Color, Optional[int]] = field(
        default_factory=lambda: {c: None for c in COLORS})
    promotion: Optional[PendingPromotion] = None
    winner: Optional[Color] = None
    win_reason: Optional[str] = None
    last_move: Optional[LastMove] = None
    message: Optional[str] = None

    @classmethod
    def empty(cls, symbols: Optional[Dict[int, PieceType]] = None) -> "GameState":
        """A board with no occupants, full stock and empty quietus."""
        return cls(squares=build_squares(symbols), occupants=[EMPTY] * 64)

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def copy(self) -> "GameState":
        """Independent successor; occupants are immutable so a list copy suffices."""
        return replace(
            self,
            occupants=list(self.occupants),
            stock={c: dict(v) for c, v in self.stock.items()},
            quietus={c: dict(v) for c, v in self.quietus.items()},
            king_on_board=dict(self.king_on_board),
            king_protected_until=dict(self.king_protected_until),
        )

    def with_message(self, message: Optional[str]) -> "GameState":
        return replace(self, message=message)

    def square(self, index: int) -> Square:
        if not 0 <= index < 64:
            raise BoardInvariantError(f"Square index {index} not on the board")
        return self.squares[index]

    def occupant_at(self, index: int) -> Occupant:
        if not 0 <= index < 64:
            raise BoardInvariantError(f"Square index {index} not on the board")
        return self.occupants[index]

    def set_occupant(self, index: int, occupant: Occupant) -> None:
        if not 0 <= index < 64:
            raise BoardInvariantError(f"Square index {index} not on the board")
        self.occupants[index] = occupant

    def iter_occupied(self) -> Iterator[Tuple[int, Occupant]]:
        for index, occ in enumerate(self.occupants):
            if not isinstance(occ, Empty):
                yield index, occ

    def find_king(self, color: Color) -> Optional[int]:
        for index, occ in self.iter_occupied():
            if isinstance(occ, Piece) and occ.color == color and occ.piece_type == chess.KING:
                return index
        return None


def ascii_board(state: GameState) -> str:
    """Plain-text board, rank 8 first.

    Pieces use python-chess symbols (uppercase white), metamorphs ``M``/``m``.
    An empty square that carries a blue symbol shows it as ``:n``, ``:q`` ...
    """
    rows = []
    for rank in range(8, 0, -1):
        row = [f"{rank} "]
        for file in range(8):
            index = chess.square(file, rank - 1)
            occ = state.occupants[index]
            if isinstance(occ, (Piece, Metamorph)):
                row.append(f" {occ.symbol()}")
            elif state.squares[index].blue_symbol is not None:
                row.append(":" + chess.piece_symbol(state.squares[index].blue_symbol))
            else:
                row.append(" .")
        rows.append("".join(row))
    rows.append("   " + " ".join(chess.FILE_NAMES))
    return "\n".join(rows)
