"""
UCI Client

This package talks to an external UCI engine (Stockfish or compatible)
as a client: it performs the handshake, submits one position at a time
and turns the engine's "info" / "bestmove" lines into scores and
principal variations.

Layers:
    transport  line channel to the engine process
    parser     stateless extraction of score / pv / bestmove
    session    handshake, single-flight requests, timeouts
    config     search limits and session timeouts

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from chess_analyzer.uci.config import EngineConfig, SearchLimit
from chess_analyzer.uci.parser import (
    MATE_SCORE,
    ReplyInfo,
    parse_bestmove,
    parse_pv,
    parse_reply_line,
    parse_score,
)
from chess_analyzer.uci.session import (
    AnalysisRequest,
    AnalysisResult,
    EngineError,
    EngineSession,
    EngineUnavailableError,
    SessionBusyError,
    SessionPhase,
)
from chess_analyzer.uci.transport import (
    SubprocessTransport,
    Transport,
    TransportError,
    find_engine,
)

__all__ = [
    'EngineConfig',
    'SearchLimit',
    'MATE_SCORE',
    'ReplyInfo',
    'parse_bestmove',
    'parse_pv',
    'parse_reply_line',
    'parse_score',
    'AnalysisRequest',
    'AnalysisResult',
    'EngineError',
    'EngineSession',
    'EngineUnavailableError',
    'SessionBusyError',
    'SessionPhase',
    'SubprocessTransport',
    'Transport',
    'TransportError',
    'find_engine',
]
