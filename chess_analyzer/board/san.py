"""
SAN Move Interpreter

Applies one Standard Algebraic Notation token (``Nf3``, ``exd6``,
``e8=Q+``, ``O-O``) to a Position.

The interpreter trusts the token to describe a legal move. It does not
detect check, mate or pins; it only picks the piece that the notation
refers to among the pseudo-legal candidates:

    1. piece letter (default pawn) and side to move select the pieces
    2. an optional file or rank hint narrows them down
    3. movement geometry towards the destination filters the rest
    4. the first survivor in scan order (rank 8 first) moves

Failure is signalled by returning False, never by raising, and leaves the
board untouched.
"""

import logging
import re
from typing import List, Optional

from chess_analyzer.board.representation import (
    Color,
    Piece,
    PieceType,
    Position,
    Square,
    coordinates_to_square,
    parse_square,
    square_to_coordinates,
)

logger = logging.getLogger(__name__)

SAN_PATTERN = re.compile(
    r"^(?P<piece>[NBRQK])?(?P<hint>[a-h1-8])?(?P<capture>x)?"
    r"(?P<dest>[a-h][1-8])(?:=?(?P<promo>[QRBN]))?$"
)

DECORATIONS = "+#!?"

# (king from, king to, rook from, rook to) per side and castling token
CASTLING_SQUARES = {
    (Color.WHITE, "O-O"): ("e1", "g1", "h1", "f1"),
    (Color.WHITE, "O-O-O"): ("e1", "c1", "a1", "d1"),
    (Color.BLACK, "O-O"): ("e8", "g8", "h8", "f8"),
    (Color.BLACK, "O-O-O"): ("e8", "c8", "a8", "d8"),
}


def strip_decorations(san: str) -> str:
    """Remove check, mate and annotation glyphs ('Qxf7#!?' -> 'Qxf7')."""
    return san.strip().rstrip(DECORATIONS)


def path_clear(position: Position, origin: Square, destination: Square) -> bool:
    """
    Check that every square strictly between two squares is empty.

    Only meaningful for squares on a common rank, file or diagonal.

    Args:
        position: Board to inspect
        origin: Start square
        destination: End square

    Returns:
        True if nothing stands in between
    """
    row, col = square_to_coordinates(origin)
    target_row, target_col = square_to_coordinates(destination)
    d_row = (target_row > row) - (target_row < row)
    d_col = (target_col > col) - (target_col < col)
    row, col = row + d_row, col + d_col
    while (row, col) != (target_row, target_col):
        if position.squares[coordinates_to_square(row, col)] is not None:
            return False
        row, col = row + d_row, col + d_col
    return True


def pawn_direction(side: Color) -> int:
    """Row delta of a pawn step (White moves towards row 0)."""
    return -1 if side is Color.WHITE else 1


def pawn_start_row(side: Color) -> int:
    return 6 if side is Color.WHITE else 1


def en_passant_victim(
    position: Position, side: Color, origin: Square, destination: Square
) -> Optional[Square]:
    """
    Square of the pawn taken en passant by a pawn moving from ``origin``.

    Recognised only for a diagonal pawn step onto an empty square with an
    enemy pawn beside the origin, on the destination file.

    Returns:
        The passed pawn's square, or None if the move is not en passant
    """
    if position.squares[destination] is not None:
        return None
    row, col = square_to_coordinates(origin)
    target_row, target_col = square_to_coordinates(destination)
    if target_row - row != pawn_direction(side) or abs(target_col - col) != 1:
        return None
    victim = coordinates_to_square(row, target_col)
    if position.squares[victim] != Piece(side.opponent(), PieceType.PAWN):
        return None
    return victim


def _reaches(
    position: Position,
    side: Color,
    piece_type: PieceType,
    origin: Square,
    destination: Square,
    capture_hint: bool,
) -> bool:
    row, col = square_to_coordinates(origin)
    target_row, target_col = square_to_coordinates(destination)
    d_row = abs(row - target_row)
    d_col = abs(col - target_col)

    if piece_type is PieceType.KNIGHT:
        return d_row * 10 + d_col in (12, 21)
    if piece_type is PieceType.KING:
        return max(d_row, d_col) == 1
    if piece_type is PieceType.BISHOP:
        return d_row == d_col and d_row > 0 and path_clear(position, origin, destination)
    if piece_type is PieceType.ROOK:
        return (
            (row == target_row or col == target_col)
            and origin != destination
            and path_clear(position, origin, destination)
        )
    if piece_type is PieceType.QUEEN:
        return (
            (row == target_row or col == target_col or d_row == d_col)
            and origin != destination
            and path_clear(position, origin, destination)
        )

    # Pawns: a file hint marks a capture (en passant included), no hint a push
    direction = pawn_direction(side)
    if capture_hint:
        if target_row - row != direction or d_col != 1:
            return False
        if position.squares[destination] is not None:
            return True
        return en_passant_victim(position, side, origin, destination) is not None
    if col != target_col:
        return False
    if position.squares[destination] is not None:
        return False
    if target_row - row == direction:
        return True
    if target_row - row == 2 * direction and row == pawn_start_row(side):
        return position.squares[coordinates_to_square(row + direction, col)] is None
    return False


def find_candidates(
    position: Position,
    side: Color,
    piece_type: PieceType,
    destination: Square,
    hint: Optional[str] = None,
) -> List[Square]:
    """
    List origin squares from which ``side``'s ``piece_type`` reaches ``destination``.

    Args:
        position: Board to scan
        side: Moving side
        piece_type: Piece named by the token
        destination: Target square
        hint: Optional file letter ('a'-'h') or rank digit ('1'-'8')

    Returns:
        Candidate origin squares in scan order (rank 8 first)
    """
    capture_hint = hint is not None and hint.isalpha()
    candidates = []
    for origin in position.pieces(side, piece_type):
        row, col = square_to_coordinates(origin)
        if hint is not None:
            if hint.isalpha() and col != ord(hint) - ord("a"):
                continue
            if hint.isdigit() and 8 - row != int(hint):
                continue
        if _reaches(position, side, piece_type, origin, destination, capture_hint):
            candidates.append(origin)
    return candidates


def apply_castling(position: Position, token: str, side: Color) -> bool:
    """
    Apply 'O-O' or 'O-O-O' for ``side``.

    Returns:
        False (board untouched) if king and rook are not on their home squares
    """
    king_from, king_to, rook_from, rook_to = CASTLING_SQUARES[(side, token)]
    if position.get(king_from) != Piece(side, PieceType.KING):
        return False
    if position.get(rook_from) != Piece(side, PieceType.ROOK):
        return False
    position.move(king_from, king_to)
    position.move(rook_from, rook_to)
    return True


def apply_san(position: Position, san: str, side: Optional[Color] = None) -> bool:
    """
    Apply a SAN token to a position in place.

    On success the moved (or promoted) piece stands on the destination, the
    origin is empty, an en-passant victim is removed, and the side to move
    passes to the opponent.

    Args:
        position: Board to mutate
        san: Move token, decorations allowed
        side: Moving side (default: position.side_to_move)

    Returns:
        True if the move was applied, False if the token could not be
        interpreted on this board (board unchanged)
    """
    side = side or position.side_to_move
    token = strip_decorations(san).replace("0", "O")

    if token in ("O-O", "O-O-O"):
        applied = apply_castling(position, token, side)
    else:
        applied = _apply_piece_move(position, strip_decorations(san), side)

    if applied:
        position.side_to_move = side.opponent()
    else:
        logger.debug(f"Could not apply SAN {san!r} for {side.name}")
    return applied


def _apply_piece_move(position: Position, token: str, side: Color) -> bool:
    match = SAN_PATTERN.match(token)
    if match is None:
        return False

    piece_type = PieceType.from_letter(match.group("piece") or "P")
    hint = match.group("hint")
    destination = parse_square(match.group("dest"))
    promo = match.group("promo")
    promotion = PieceType.from_letter(promo) if promo else None

    occupant = position.squares[destination]
    if occupant is not None and occupant.color is side:
        return False

    candidates = find_candidates(position, side, piece_type, destination, hint)
    if not candidates:
        return False
    origin = candidates[0]

    victim = None
    if piece_type is PieceType.PAWN:
        victim = en_passant_victim(position, side, origin, destination)

    position.move(origin, destination, promotion)
    if victim is not None:
        position.set(victim, None)
    return True
