"""
Material + Piece-Square Table Evaluation

Static fallback scorer used when no analysis engine is reachable, and for
instant feedback before an engine connection exists.

Evaluation Components:
    - Material: P=10, N=32, B=33, R=50, Q=90, K=2000 (tenths of a pawn)
    - Position: PST bonuses for each piece type (tenths of a pawn)

The sum is divided by 10 so that 1.0 = one pawn. Kings carry a large
value that cancels out whenever both kings are on the board.

Reference:
    Simplified Evaluation Function
    https://www.chessprogramming.org/Simplified_Evaluation_Function
"""

import logging
from typing import Iterable, Optional

import numpy as np

from chess_analyzer.board.representation import (
    Color,
    PieceType,
    Position,
    square_to_coordinates,
)
from chess_analyzer.board.san import apply_san
from chess_analyzer.data.pgn_parser import is_result_token
from chess_analyzer.evaluation.base import Evaluator
from chess_analyzer.evaluation.series import EvalSeries

logger = logging.getLogger(__name__)

#fmt: off
# ============================================================================
# Material Values (tenths of a pawn)
# ============================================================================

PIECE_VALUES = {
    PieceType.PAWN: 10,
    PieceType.KNIGHT: 32,
    PieceType.BISHOP: 33,
    PieceType.ROOK: 50,
    PieceType.QUEEN: 90,
    PieceType.KING: 2000,
}

NORMALIZATION = 10.0


# ============================================================================
# Piece-Square Tables (PSTs)
# ============================================================================
# Values are from White's perspective (row 0 = rank 8, row 7 = rank 1).
# For Black pieces the table is flipped vertically.
# ============================================================================

PAWN_TABLE = np.array([
    [0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, 0.0],  # Rank 8
    [5.0,  5.0,  5.0,  5.0,  5.0,  5.0,  5.0, 5.0],  # Rank 7
    [1.0,  1.0,  2.0,  3.0,  3.0,  2.0,  1.0, 1.0],  # Rank 6
    [0.5,  0.5,  1.0,  2.5,  2.5,  1.0,  0.5, 0.5],  # Rank 5
    [0.0,  0.0,  0.0,  2.0,  2.0,  0.0,  0.0, 0.0],  # Rank 4
    [0.5, -0.5, -1.0,  0.0,  0.0, -1.0, -0.5, 0.5],  # Rank 3
    [0.5,  1.0,  1.0, -2.0, -2.0,  1.0,  1.0, 0.5],  # Rank 2
    [0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, 0.0],  # Rank 1
])

KNIGHT_TABLE = np.array([
    [-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0],
    [-4.0, -2.0,  0.0,  0.0,  0.0,  0.0, -2.0, -4.0],
    [-3.0,  0.0,  1.0,  1.5,  1.5,  1.0,  0.0, -3.0],
    [-3.0,  0.5,  1.5,  2.0,  2.0,  1.5,  0.5, -3.0],
    [-3.0,  0.0,  1.5,  2.0,  2.0,  1.5,  0.0, -3.0],
    [-3.0,  0.5,  1.0,  1.5,  1.5,  1.0,  0.5, -3.0],
    [-4.0, -2.0,  0.0,  0.5,  0.5,  0.0, -2.0, -4.0],
    [-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0],
])

BISHOP_TABLE = np.array([
    [-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0],
    [-1.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -1.0],
    [-1.0,  0.0,  0.5,  1.0,  1.0,  0.5,  0.0, -1.0],
    [-1.0,  0.5,  0.5,  1.0,  1.0,  0.5,  0.5, -1.0],
    [-1.0,  0.0,  1.0,  1.0,  1.0,  1.0,  0.0, -1.0],
    [-1.0,  1.0,  1.0,  1.0,  1.0,  1.0,  1.0, -1.0],
    [-1.0,  0.5,  0.0,  0.0,  0.0,  0.0,  0.5, -1.0],
    [-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0],
])

ROOK_TABLE = np.array([
    [ 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0,  0.0],
    [ 0.5, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0,  0.5],
    [-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5],
    [-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5],
    [-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5],
    [-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5],
    [-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5],
    [ 0.0, 0.0, 0.0, 0.5, 0.5, 0.0, 0.0,  0.0],
])

QUEEN_TABLE = np.array([
    [-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0],
    [-1.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -1.0],
    [-1.0,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -1.0],
    [-0.5,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -0.5],
    [ 0.0,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -0.5],
    [-1.0,  0.5,  0.5,  0.5,  0.5,  0.5,  0.0, -1.0],
    [-1.0,  0.0,  0.5,  0.0,  0.0,  0.0,  0.0, -1.0],
    [-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0],
])

# King PST: stay sheltered, prefer the castled corners
KING_TABLE = np.array([
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-2.0, -3.0, -3.0, -4.0, -4.0, -3.0, -3.0, -2.0],
    [-1.0, -2.0, -2.0, -2.0, -2.0, -2.0, -2.0, -1.0],
    [ 2.0,  2.0,  0.0,  0.0,  0.0,  0.0,  2.0,  2.0],
    [ 2.0,  3.0,  1.0,  0.0,  0.0,  1.0,  3.0,  2.0],
])
#fmt: on


class MaterialEvaluator(Evaluator):
    """
    Material and piece-square table evaluation.

    Attributes:
        piece_tables: Dictionary mapping piece types to PST arrays
    """

    def __init__(self):
        """Initialize the evaluator with its piece-square tables."""
        self.piece_tables = {
            PieceType.PAWN: PAWN_TABLE,
            PieceType.KNIGHT: KNIGHT_TABLE,
            PieceType.BISHOP: BISHOP_TABLE,
            PieceType.ROOK: ROOK_TABLE,
            PieceType.QUEEN: QUEEN_TABLE,
            PieceType.KING: KING_TABLE,
        }

    def evaluate(self, position: Position) -> float:
        """
        Evaluate position using material + PST.

        Args:
            position: Board to evaluate

        Returns:
            float: Evaluation in pawn units (White's perspective)
        """
        score = 0.0

        for square, piece in enumerate(position.squares):
            if piece is None:
                continue

            row, col = square_to_coordinates(square)
            if piece.color is Color.BLACK:
                row = 7 - row

            total_value = PIECE_VALUES[piece.piece_type] + self.piece_tables[piece.piece_type][row, col]

            if piece.color is Color.WHITE:
                score += total_value
            else:
                score -= total_value

        return float(score) / NORMALIZATION


def material_series(
    tokens: Iterable[str], evaluator: Optional[Evaluator] = None
) -> EvalSeries:
    """
    Score every ply of a transcript with a static evaluator.

    Replays the tokens from the initial position and stops at the first
    result token or at the first token that cannot be applied.

    Args:
        tokens: SAN move tokens in play order
        evaluator: Evaluator to use (default: MaterialEvaluator)

    Returns:
        EvalSeries with source "material"
    """
    evaluator = evaluator or MaterialEvaluator()
    series = EvalSeries(source="material")
    position = Position.initial()

    for index, token in enumerate(tokens):
        if not token:
            continue
        if is_result_token(token):
            break
        if not apply_san(position, token):
            logger.warning(f"Material replay stopped at token {index + 1} ({token!r})")
            series.stopped_at = index
            series.failed_token = token
            break
        series.scores.append(evaluator.evaluate(position))

    return series
