"""
FEN encoding for engine requests.

The replay interpreters do not track castling rights, the en-passant target
square or the move clocks across a game, so those four FEN fields are always
written as fixed placeholders::

    <placement> <side> - - 0 1

This is a known approximation: an engine sees no castling rights and no
en-passant capture in the encoded position. It is kept on purpose since
changing it changes the scores an engine reports.
"""

from typing import Optional

from chess_analyzer.board.representation import (
    Color,
    Piece,
    Position,
    coordinates_to_square,
)

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

PLACEHOLDER_FIELDS = "- - 0 1"


def encode_placement(position: Position) -> str:
    """Piece-placement field, rank 8 first, empty runs collapsed to digits."""
    rows = []
    for row in range(8):
        text = ""
        empty = 0
        for col in range(8):
            piece = position.squares[coordinates_to_square(row, col)]
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += piece.symbol
        if empty:
            text += str(empty)
        rows.append(text)
    return "/".join(rows)


def encode_position(position: Position, side_to_move: Optional[Color] = None) -> str:
    """
    Serialise a position to the FEN text sent with ``position fen``.

    Args:
        position: Board to encode
        side_to_move: Override for the side field (default: position.side_to_move)

    Returns:
        FEN string with placeholder castling, en-passant and clock fields
    """
    side = side_to_move or position.side_to_move
    return f"{encode_placement(position)} {side.value} {PLACEHOLDER_FIELDS}"


def decode_placement(fen: str) -> Position:
    """
    Build a Position from the placement and side fields of a FEN string.

    Remaining fields are ignored, matching what the encoder can represent.

    Args:
        fen: FEN string (at least the placement field)

    Returns:
        Position with the given pieces and side to move

    Raises:
        ValueError: If the placement field is malformed
    """
    fields = fen.split()
    if not fields:
        raise ValueError("Empty FEN string")

    ranks = fields[0].split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")

    position = Position()
    for row, rank_text in enumerate(ranks):
        col = 0
        for char in rank_text:
            if char.isdigit():
                col += int(char)
            else:
                if col >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                position.squares[coordinates_to_square(row, col)] = Piece.from_symbol(char)
                col += 1
        if col != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    if len(fields) > 1:
        if fields[1] not in ("w", "b"):
            raise ValueError(f"Invalid FEN side-to-move field: {fields[1]!r}")
        position.side_to_move = Color(fields[1])
    return position
