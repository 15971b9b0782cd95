"""
Board Module

Position model and the interpreters that mutate it.

Key Components:
    - Position: 64-square board plus side to move
    - apply_san: Short algebraic (SAN) move interpreter
    - apply_long_move: Long algebraic (engine) move interpreter
    - encode_position: FEN text for the engine's ``position fen`` command

Data Flow:
    SAN token → apply_san(position) → Position → encode_position() → FEN
"""

from chess_analyzer.board.representation import (
    Color,
    Piece,
    PieceType,
    Position,
    coordinates_to_square,
    parse_square,
    square_name,
    square_to_coordinates,
)
from chess_analyzer.board.san import apply_san
from chess_analyzer.board.long_move import apply_long_move, is_long_move
from chess_analyzer.board.fen import decode_placement, encode_position

__all__ = [
    'Color',
    'Piece',
    'PieceType',
    'Position',
    'coordinates_to_square',
    'parse_square',
    'square_name',
    'square_to_coordinates',
    'apply_san',
    'apply_long_move',
    'is_long_move',
    'decode_placement',
    'encode_position',
]
