"""
Stateless extraction of scores and moves from UCI engine output.

Each function looks at a single line; a line may carry any combination of
a score, a principal variation and a best move::

    info depth 12 score cp 34 nodes 12345 pv e2e4 e7e5
    info depth 20 score mate -3 pv h7h8q g8h8
    bestmove e2e4 ponder e7e5
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from chess_analyzer.board.long_move import is_long_move

# Stand-in score for "forced mate", in pawn units
MATE_SCORE = 99.0

_MATE = re.compile(r"\bscore\s+mate\s+(-?\d+)")
_CENTIPAWNS = re.compile(r"\bscore\s+cp\s+(-?\d+)")
_DEPTH = re.compile(r"\bdepth\s+(\d+)")
_BESTMOVE = re.compile(r"^\s*bestmove\s+([a-h][1-8][a-h][1-8][qrbn]?)\b")


@dataclass
class ReplyInfo:
    """Everything one engine line says about the current search."""

    score: Optional[float] = None
    pv: List[str] = field(default_factory=list)
    best_move: Optional[str] = None
    depth: Optional[int] = None
    terminal: bool = False
    """True for the 'bestmove' line that ends a search, even 'bestmove (none)'"""


def parse_score(line: str) -> Optional[float]:
    """
    Extract the score of an ``info`` line in pawn units.

    Mate scores map to +/- MATE_SCORE with the sign of the mate distance
    (``mate 0`` counts as positive). Centipawns are divided by 100.

    Returns:
        Score, or None if the line has no score
    """
    mate = _MATE.search(line)
    if mate:
        return MATE_SCORE if int(mate.group(1)) >= 0 else -MATE_SCORE
    centipawns = _CENTIPAWNS.search(line)
    if centipawns:
        return int(centipawns.group(1)) / 100
    return None


def parse_pv(line: str) -> List[str]:
    """
    Extract the principal variation following the ``pv`` marker.

    Collection stops at the first token that is not a long-algebraic move.

    Returns:
        Moves in order (empty if the line has no PV)
    """
    tokens = line.split()
    if "pv" not in tokens:
        return []
    moves = []
    for token in tokens[tokens.index("pv") + 1:]:
        if not is_long_move(token):
            break
        moves.append(token)
    return moves


def parse_bestmove(line: str) -> Optional[str]:
    """Best move of a terminal ``bestmove`` line, or None."""
    match = _BESTMOVE.match(line)
    return match.group(1) if match else None


def is_terminal(line: str) -> bool:
    tokens = line.split()
    return bool(tokens) and tokens[0] == "bestmove"


def parse_depth(line: str) -> Optional[int]:
    match = _DEPTH.search(line)
    return int(match.group(1)) if match else None


def parse_reply_line(line: str) -> ReplyInfo:
    """Run every extraction over one line."""
    return ReplyInfo(
        score=parse_score(line),
        pv=parse_pv(line),
        best_move=parse_bestmove(line),
        depth=parse_depth(line),
        terminal=is_terminal(line),
    )
