"""
Board Representation

This module holds the position model used by the move interpreters, the
FEN encoder and the material evaluator.

Board Orientation:
    - Row 0 = Rank 8 (Black's back rank)
    - Row 7 = Rank 1 (White's back rank)
    - Column 0 = A-file
    - Column 7 = H-file

Squares are addressed by a single index ``row * 8 + col`` (0 = a8,
63 = h1) or by their algebraic name ("e4"). The scan order used by the SAN
interpreter follows the index order, i.e. rank 8 first, a-file first.

A Position is a plain mutable value. Anything that needs an independent
future (PV stepping, speculative replay) must work on ``copy()``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union


class Color(Enum):
    """Side of a piece or side to move."""

    WHITE = "w"
    BLACK = "b"

    def opponent(self) -> "Color":
        """Return the other colour."""
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(Enum):
    """Piece kinds, valued by their SAN / FEN letter."""

    PAWN = "P"
    KNIGHT = "N"
    BISHOP = "B"
    ROOK = "R"
    QUEEN = "Q"
    KING = "K"

    @property
    def letter(self) -> str:
        return self.value

    @classmethod
    def from_letter(cls, letter: str) -> "PieceType":
        """Piece type from an upper- or lowercase letter ('n' -> KNIGHT)."""
        try:
            return cls(letter.upper())
        except ValueError:
            raise ValueError(f"Invalid piece letter: {letter!r}") from None


@dataclass(frozen=True)
class Piece:
    """Immutable (colour, piece type) pair occupying a square."""

    color: Color
    piece_type: PieceType

    @property
    def symbol(self) -> str:
        """FEN character: uppercase for White, lowercase for Black."""
        letter = self.piece_type.letter
        return letter if self.color is Color.WHITE else letter.lower()

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        """Create a piece from a FEN character, e.g. 'n' -> black knight."""
        color = Color.WHITE if symbol.isupper() else Color.BLACK
        return cls(color, PieceType.from_letter(symbol))

    def __str__(self) -> str:
        return self.symbol


Square = int
SquareRef = Union[int, str]

FILES = "abcdefgh"
RANKS = "12345678"

BACK_RANK = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]


def square_to_coordinates(square: Square) -> Tuple[int, int]:
    """
    Convert a square index to (row, column) coordinates.

    Args:
        square: Square index (0-63) where 0=a8, 63=h1

    Returns:
        Tuple of (row, col) where row 0 = rank 8 and col 0 = a-file
    """
    return square // 8, square % 8


def coordinates_to_square(row: int, col: int) -> Square:
    """
    Convert (row, column) coordinates to a square index.

    Args:
        row: Row index (0-7) where 0 is rank 8
        col: Column index (0-7) where 0 is the a-file

    Returns:
        Square index (0-63)
    """
    return row * 8 + col


def parse_square(name: str) -> Square:
    """
    Convert an algebraic square name to an index.

    Args:
        name: Square such as "e4"

    Returns:
        Square index

    Raises:
        ValueError: If the name is not a board square
    """
    if len(name) != 2 or name[0] not in FILES or name[1] not in RANKS:
        raise ValueError(f"Invalid square name: {name!r}")
    col = FILES.index(name[0])
    row = 8 - int(name[1])
    return coordinates_to_square(row, col)


def square_name(square: Square) -> str:
    """Algebraic name of a square index, e.g. 52 -> 'e2'."""
    row, col = square_to_coordinates(square)
    return f"{FILES[col]}{8 - row}"


def _index(square: SquareRef) -> Square:
    return parse_square(square) if isinstance(square, str) else square


class Position:
    """
    Mutable 8x8 board plus side to move.

    The mutation primitives do no rule checking at all: ``move`` relocates
    whatever sits on the origin square. Rule-aware mutation lives in the
    SAN and long-move interpreters.

    Attributes:
        squares: 64 cells, each None or a Piece
        side_to_move: Colour whose turn it is
    """

    __slots__ = ("squares", "side_to_move")

    def __init__(
        self,
        squares: Optional[List[Optional[Piece]]] = None,
        side_to_move: Color = Color.WHITE,
    ):
        if squares is None:
            squares = [None] * 64
        if len(squares) != 64:
            raise ValueError(f"A position needs 64 squares, got {len(squares)}")
        self.squares: List[Optional[Piece]] = list(squares)
        self.side_to_move = side_to_move

    @classmethod
    def initial(cls) -> "Position":
        """Standard starting position, White to move."""
        position = cls()
        for col, piece_type in enumerate(BACK_RANK):
            position.squares[coordinates_to_square(0, col)] = Piece(Color.BLACK, piece_type)
            position.squares[coordinates_to_square(1, col)] = Piece(Color.BLACK, PieceType.PAWN)
            position.squares[coordinates_to_square(6, col)] = Piece(Color.WHITE, PieceType.PAWN)
            position.squares[coordinates_to_square(7, col)] = Piece(Color.WHITE, piece_type)
        return position

    # -- Element access -----------------------------------------------------

    def get(self, square: SquareRef) -> Optional[Piece]:
        """Piece on a square, or None."""
        return self.squares[_index(square)]

    def set(self, square: SquareRef, piece: Optional[Piece]) -> None:
        """Place a piece on (or clear) a square."""
        self.squares[_index(square)] = piece

    def move(
        self,
        origin: SquareRef,
        destination: SquareRef,
        promotion: Optional[PieceType] = None,
    ) -> None:
        """
        Relocate the piece on ``origin`` to ``destination``.

        Whatever stood on the destination is overwritten. With a promotion
        the piece keeps its colour and takes the new type.

        Args:
            origin: Square to move from
            destination: Square to move to
            promotion: Optional piece type replacing the moved piece
        """
        origin = _index(origin)
        destination = _index(destination)
        piece = self.squares[origin]
        if piece is not None and promotion is not None:
            piece = Piece(piece.color, promotion)
        self.squares[origin] = None
        self.squares[destination] = piece

    def copy(self) -> "Position":
        """Independent copy (pieces are immutable, so a shallow list copy is enough)."""
        return Position(self.squares, self.side_to_move)

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> List[Square]:
        """Squares holding ``color``'s ``piece_type``, in scan order."""
        target = Piece(color, piece_type)
        return [sq for sq, piece in enumerate(self.squares) if piece == target]

    def piece_count(self) -> int:
        return sum(1 for piece in self.squares if piece is not None)

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.squares == other.squares and self.side_to_move == other.side_to_move

    def __repr__(self) -> str:
        rows = []
        for row in range(8):
            cells = []
            for col in range(8):
                piece = self.squares[coordinates_to_square(row, col)]
                cells.append(piece.symbol if piece else ".")
            rows.append(f"{8 - row} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
