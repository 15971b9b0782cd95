"""
Evaluation Module

Static evaluation and score presentation.

Key Components:
    - Evaluator (ABC): Interface for static position evaluators
    - MaterialEvaluator: Material + piece-square table fallback scorer
    - material_series: Score a whole transcript without an engine
    - EvalSeries: Per-ply score series
    - eval_to_fraction / format_score: Display mapping of scores

Data Flow:
    Position → evaluator.evaluate() → float (pawn units)
                                        Positive = White advantage
                                        Negative = Black advantage
"""

from chess_analyzer.evaluation.base import Evaluator
from chess_analyzer.evaluation.codec import SATURATION, eval_to_fraction, format_score
from chess_analyzer.evaluation.material import MaterialEvaluator, material_series
from chess_analyzer.evaluation.series import EvalSeries

__all__ = [
    'Evaluator',
    'MaterialEvaluator',
    'material_series',
    'EvalSeries',
    'SATURATION',
    'eval_to_fraction',
    'format_score',
]
