"""
Evaluation series: one score per applied ply, in play order.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class EvalSeries:
    """Per-ply scores of one transcript, in pawn units.

    Engine scores are stored as the engine reports them, i.e. relative to
    the side to move in the scored position. Material scores are always
    White positive.
    """

    scores: List[float] = field(default_factory=list)
    source: str = "engine"  # "engine", "material" or "embedded"
    stopped_at: Optional[int] = None  # index of the token that failed to apply
    failed_token: Optional[str] = None

    @property
    def complete(self) -> bool:
        """True if the walk was not cut short by an unplayable token."""
        return self.stopped_at is None

    def __len__(self) -> int:
        return len(self.scores)

    def score_at(self, ply: int) -> Optional[float]:
        """
        Score after ``ply`` plies, clamped into the series.

        Returns:
            None for an empty series
        """
        if not self.scores:
            return None
        ply = max(0, min(len(self.scores) - 1, ply))
        return self.scores[ply]
