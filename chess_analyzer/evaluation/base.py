"""
Abstract Evaluator Interface

This module defines the abstract base class for static position evaluators.
The analysis orchestrator falls back to an evaluator whenever no engine
session can be established, so any implementation of this interface can
stand in for the engine.

Key Principles:
    1. Evaluators are stateless
    2. evaluate() returns pawn units from White's perspective
    3. Positive = White advantage, Negative = Black advantage

Convention:
    - 1.0 = one pawn
    - Return 0 for perfectly balanced positions
"""

from abc import ABC, abstractmethod

from chess_analyzer.board.representation import Position


class Evaluator(ABC):
    """
    Abstract base class for static position evaluation.

    Methods:
        evaluate(position): Returns position evaluation in pawn units
    """

    @abstractmethod
    def evaluate(self, position: Position) -> float:
        """
        Evaluate a position from White's perspective.

        Args:
            position: Board to evaluate

        Returns:
            float: Evaluation in pawn units
        """
        pass

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
