"""
Transcript input module: PGN text to SAN move tokens.
"""

from chess_analyzer.data.pgn_parser import (
    RESULT_TOKENS,
    Transcript,
    extract_evals,
    extract_headers,
    extract_moves,
    is_result_token,
    load_transcript,
    parse_transcript,
)

__all__ = [
    "RESULT_TOKENS",
    "Transcript",
    "extract_evals",
    "extract_headers",
    "extract_moves",
    "is_result_token",
    "load_transcript",
    "parse_transcript",
]
