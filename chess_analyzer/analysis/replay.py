"""
Replay helpers: walk a transcript to any ply and step through an engine line.

Positions are always rebuilt from scratch (initial position or a copy of
the base) so that nothing a caller does to a returned position leaks back
into the cursor.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from chess_analyzer.analysis.config import MAX_PV_LENGTH
from chess_analyzer.board.long_move import apply_long_move
from chess_analyzer.board.representation import Position
from chess_analyzer.board.san import apply_san
from chess_analyzer.data.pgn_parser import is_result_token

logger = logging.getLogger(__name__)


@dataclass
class ReplayState:
    """Position reached after replaying a prefix of a transcript."""

    position: Position
    applied: int
    failed_token: Optional[str] = None


def position_at(tokens: List[str], index: int) -> ReplayState:
    """
    Replay the first ``index`` tokens from the initial position.

    Empty tokens are skipped. Replay stops early at a result token or at the
    first token that cannot be applied.

    Args:
        tokens: SAN move tokens
        index: Number of tokens to replay (clamped to the transcript)

    Returns:
        ReplayState with the number of moves actually applied
    """
    index = max(0, min(len(tokens), index))
    position = Position.initial()
    applied = 0

    for token in tokens[:index]:
        if not token:
            continue
        if is_result_token(token):
            break
        if not apply_san(position, token):
            logger.debug(f"Replay stopped at {token!r} after {applied} moves")
            return ReplayState(position, applied, failed_token=token)
        applied += 1

    return ReplayState(position, applied)


class ReplayCursor:
    """
    Move-by-move navigation over a transcript.

    Index 0 is the initial position; index ``len(tokens)`` is after the
    last token. Every navigation method returns the new ReplayState.
    """

    def __init__(self, tokens: Iterable[str]):
        self.tokens = list(tokens)
        self.index = 0

    def __len__(self) -> int:
        return len(self.tokens)

    @property
    def current_move(self) -> Optional[str]:
        """Token that led to the current position, if any."""
        return self.tokens[self.index - 1] if self.index > 0 else None

    def state(self) -> ReplayState:
        return position_at(self.tokens, self.index)

    def jump(self, index: int) -> ReplayState:
        self.index = max(0, min(len(self.tokens), index))
        return self.state()

    def first(self) -> ReplayState:
        return self.jump(0)

    def previous(self) -> ReplayState:
        return self.jump(self.index - 1)

    def next(self) -> ReplayState:
        return self.jump(self.index + 1)

    def last(self) -> ReplayState:
        return self.jump(len(self.tokens))

    def status(self) -> str:
        """Human-readable location, e.g. 'Move 3 / 40'."""
        return f"Move {self.index} / {len(self.tokens)}"


class PVNavigator:
    """
    Step through an engine principal variation from a base position.

    Args:
        base: Position the variation starts from (copied)
        pv: Long-algebraic moves, truncated to ``max_length``
        max_length: Longest variation kept
    """

    def __init__(self, base: Position, pv: Iterable[str], max_length: int = MAX_PV_LENGTH):
        self.base = base.copy()
        self.pv = list(pv)[:max_length]
        self.index = 0

    @property
    def at_start(self) -> bool:
        return self.index == 0

    @property
    def at_end(self) -> bool:
        return self.index == len(self.pv)

    @property
    def current_move(self) -> Optional[str]:
        return self.pv[self.index - 1] if self.index > 0 else None

    def step(self, delta: int) -> Position:
        """Move ``delta`` plies along the variation (clamped) and return the position."""
        self.index = max(0, min(len(self.pv), self.index + delta))
        return self.position()

    def reset(self) -> Position:
        self.index = 0
        return self.position()

    def position(self) -> Position:
        """
        Rebuild the position after ``index`` variation moves.

        A move that cannot be applied ends the rebuild; the position before
        it is returned.
        """
        position = self.base.copy()
        for move in self.pv[: self.index]:
            if not apply_long_move(position, move):
                logger.debug(f"PV move {move!r} could not be applied")
                break
        return position
