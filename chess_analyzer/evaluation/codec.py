"""
Display mapping for evaluation scores.

Scores (pawn units, White positive) are squashed into a bar fraction in
[0, 1]:

    None              -> 0.5        (unknown, not "equal")
    |score| >= 98     -> 1.0 / 0.0  (forced mate)
    otherwise         -> (tanh(score / 2) + 1) / 2
"""

import math
from typing import Optional

from chess_analyzer.uci.parser import MATE_SCORE

SATURATION = 98.0


def eval_to_fraction(score: Optional[float]) -> float:
    """
    Map a score to the fraction of the bar filled for White.

    Args:
        score: Pawn-unit score, or None when unknown

    Returns:
        Fraction in [0, 1], monotonic non-decreasing in ``score``
    """
    if score is None:
        return 0.5
    if abs(score) >= SATURATION:
        return 1.0 if score > 0 else 0.0
    fraction = (math.tanh(score / 2) + 1) / 2
    return min(1.0, max(0.0, fraction))


def format_score(score: Optional[float], digits: int = 1) -> str:
    """
    Human-readable score label.

    Examples:
        0.34 -> "+0.3", -1.25 -> "-1.2", None -> "-", 99.0 -> "#+"
    """
    if score is None:
        return "-"
    if abs(score) >= MATE_SCORE:
        return "#+" if score > 0 else "#-"
    sign = "+" if score >= 0 else ""
    return f"{sign}{score:.{digits}f}"
