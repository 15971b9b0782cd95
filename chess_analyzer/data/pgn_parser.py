"""
Transcript parser: turns PGN text into the SAN token list fed to replay.

Only the main line is kept. Tag pairs, comments, variations, move numbers,
NAGs and the result marker are stripped; whatever remains is split on
whitespace without being validated, so an unplayable token surfaces later
as a failed ply rather than as a parse error here.

Embedded engine annotations (``{[%eval 0.31]}``, ``{[%eval #-3]}``) are
collected separately so a transcript exported from an analysis site can be
shown without running an engine.
"""

import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import chess.pgn

from chess_analyzer.uci.parser import MATE_SCORE

logger = logging.getLogger(__name__)

RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")

_TAG_PAIRS = re.compile(r"\[[^\]]*\]")
_COMMENTS = re.compile(r"\{[^}]*\}")
_LINE_COMMENTS = re.compile(r";[^\n]*")
_VARIATIONS = re.compile(r"\([^()]*\)")
_MOVE_NUMBERS = re.compile(r"\d+\.(?:\.\.)?")
_NAGS = re.compile(r"\$\d+")
_RESULTS = re.compile(r"(?<!\S)(?:1-0|0-1|1/2-1/2|\*)(?!\S)")
# Comments, quoted tag values and variation brackets, in order of appearance
_MOVETEXT_ELEMENTS = re.compile(r'\{[^}]*\}|"[^"\n]*"|;[^\n]*|[()]')
_EVAL_ANNOTATION = re.compile(r"%eval\s+([^\s\]}]+)", re.IGNORECASE)
_MATE_ANNOTATION = re.compile(r"^#(-?)\d+$")


@dataclass
class Transcript:
    """A parsed game transcript."""

    headers: Dict[str, str] = field(default_factory=dict)
    moves: List[str] = field(default_factory=list)
    evals: List[float] = field(default_factory=list)

    @property
    def has_evals(self) -> bool:
        return bool(self.evals)


def is_result_token(token: str) -> bool:
    """Whether a token is a game-termination marker such as '1-0'."""
    return token in RESULT_TOKENS


def extract_headers(text: str) -> Dict[str, str]:
    """
    Read the tag pairs of the first game in ``text``.

    Args:
        text: PGN text

    Returns:
        Mapping of tag name to value (empty if there is no game)
    """
    headers = chess.pgn.read_headers(io.StringIO(text))
    if headers is None:
        return {}
    return dict(headers)


def clean_movetext(text: str) -> str:
    """Strip everything but move tokens from PGN text."""
    text = _TAG_PAIRS.sub(" ", text)
    text = _COMMENTS.sub(" ", text)
    text = _LINE_COMMENTS.sub(" ", text)
    # Innermost variations first so nested ones unwind completely
    previous = None
    while previous != text:
        previous = text
        text = _VARIATIONS.sub(" ", text)
    text = _MOVE_NUMBERS.sub(" ", text)
    text = _NAGS.sub(" ", text)
    text = _RESULTS.sub(" ", text)
    return text.strip()


def extract_moves(text: str) -> List[str]:
    """
    Split PGN movetext into SAN tokens.

    Example:
        "1. e4 e5 2. Nf3 {best} Nc6 1-0" -> ["e4", "e5", "Nf3", "Nc6"]
    """
    return clean_movetext(text).split()


def parse_eval_annotation(value: str) -> Optional[float]:
    """
    Convert an ``%eval`` value to pawn units.

    Mate annotations ('#3', '#-2') map to +/- MATE_SCORE.

    Returns:
        Score, or None if the value is not a number
    """
    mate = _MATE_ANNOTATION.match(value)
    if mate:
        return -MATE_SCORE if mate.group(1) else MATE_SCORE
    try:
        return float(value)
    except ValueError:
        return None


def mainline_comments(text: str) -> List[str]:
    """
    Brace comments that belong to the main line, in order of appearance.

    Comments inside ``( ... )`` variations, at any nesting depth, are
    skipped. Parentheses inside comments or tag values do not count as
    variation brackets.
    """
    comments = []
    depth = 0
    for match in _MOVETEXT_ELEMENTS.finditer(text):
        element = match.group(0)
        if element == "(":
            depth += 1
        elif element == ")":
            depth = max(depth - 1, 0)
        elif element.startswith("{") and depth == 0:
            comments.append(element)
    return comments


def extract_evals(text: str) -> List[float]:
    """Collect the main line's embedded ``%eval`` annotations in order."""
    evals = []
    for comment in mainline_comments(text):
        for match in _EVAL_ANNOTATION.finditer(comment):
            score = parse_eval_annotation(match.group(1))
            if score is not None:
                evals.append(score)
    return evals


def parse_transcript(text: str) -> Transcript:
    """
    Parse PGN text into headers, move tokens and embedded evaluations.

    Args:
        text: Raw transcript text

    Returns:
        Transcript (moves may be empty)
    """
    transcript = Transcript(
        headers=extract_headers(text),
        moves=extract_moves(text),
        evals=extract_evals(text),
    )
    logger.info(
        f"Parsed transcript: {len(transcript.moves)} moves, "
        f"{len(transcript.evals)} embedded evals"
    )
    return transcript


def load_transcript(pgn_path: Path) -> Transcript:
    """
    Read and parse a transcript file.

    Args:
        pgn_path: Path to PGN file

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not pgn_path.exists():
        raise FileNotFoundError(f"PGN file not found: {pgn_path}")

    logger.info(f"Loading transcript: {pgn_path}")
    with open(pgn_path, "r", encoding="utf-8", errors="ignore") as pgn_file:
        return parse_transcript(pgn_file.read())
