"""
Long-algebraic move interpreter.

Engines report moves as origin + destination (+ promotion letter), e.g.
``e2e4``, ``e7e8q`` or ``e1g1`` for castling. The origin is explicit, so
there is nothing to disambiguate; the implicit effects to reconstruct are
the rook hop when a king castles and the removal of a pawn taken en passant.
"""

import re
from typing import Optional

from chess_analyzer.board.representation import Color, PieceType, Position, parse_square
from chess_analyzer.board.san import en_passant_victim

LONG_MOVE_PATTERN = re.compile(r"^([a-h][1-8])([a-h][1-8])([qrbn])?$")

# king destination -> (rook from, rook to), keyed by side
CASTLING_ROOK_HOPS = {
    Color.WHITE: ("e1", {"g1": ("h1", "f1"), "c1": ("a1", "d1")}),
    Color.BLACK: ("e8", {"g8": ("h8", "f8"), "c8": ("a8", "d8")}),
}


def is_long_move(token: str) -> bool:
    """Whether a token is a well-formed long-algebraic move."""
    return LONG_MOVE_PATTERN.match(token) is not None


def apply_long_move(position: Position, move: str, side: Optional[Color] = None) -> bool:
    """
    Apply a long-algebraic move to a position in place.

    Args:
        position: Board to mutate
        move: Move such as "g1f3" or "a7a8q"
        side: Moving side (default: position.side_to_move)

    Returns:
        False if the token is malformed or the origin square is empty
    """
    match = LONG_MOVE_PATTERN.match(move)
    if match is None:
        return False
    origin, destination, promo = match.groups()

    moving = position.get(origin)
    if moving is None:
        return False

    side = side or position.side_to_move
    promotion = PieceType.from_letter(promo) if promo else None

    victim = None
    if moving.piece_type is PieceType.PAWN:
        victim = en_passant_victim(
            position, side, parse_square(origin), parse_square(destination)
        )

    position.move(origin, destination, promotion)
    if victim is not None:
        position.set(victim, None)

    if moving.piece_type is PieceType.KING:
        home, hops = CASTLING_ROOK_HOPS[side]
        if origin == home and destination in hops:
            rook_from, rook_to = hops[destination]
            position.move(rook_from, rook_to)

    position.side_to_move = side.opponent()
    return True
