"""
UCI Client Session

This module drives a long-running UCI engine (Stockfish or compatible)
over a line transport, one analysis request at a time.

Protocol Flow:
    Client → "uci"
    Engine → "id name ..." / "option ..." / "uciok"
    Client → "isready"
    Engine → "readyok"
    Client → "ucinewgame"

    Client → "stop"
    Client → "position fen <FEN>"
    Client → "go depth 13"            (or "go movetime 750")
    Engine → "info depth 1 score cp 25 pv e2e4 ..."
    Engine → ...
    Engine → "bestmove e2e4 ponder e7e5"

Phases:
    UNINITIALIZED → HANDSHAKING → READY ⇄ BUSY
    any failure (handshake timeout, broken pipe, search timeout) → FAILED

A FAILED session is never repaired. The owner discards it and builds a new
one on the next request.

Threading:
    - analyze() blocks the calling thread until the request resolves
    - at most one request is in flight; a concurrent submit is rejected
      before anything reaches the transport
    - phase transitions are guarded by a lock

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from chess_analyzer.uci.config import EngineConfig, SearchLimit
from chess_analyzer.uci.parser import parse_reply_line
from chess_analyzer.uci.transport import Transport, TransportError

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    UNINITIALIZED = "uninitialized"
    HANDSHAKING = "handshaking"
    READY = "ready"
    BUSY = "busy"
    FAILED = "failed"


class EngineError(RuntimeError):
    """Base class for engine session errors."""


class EngineUnavailableError(EngineError):
    """The session could not be established or has failed."""


class SessionBusyError(EngineError):
    """A request was submitted while another one is in flight."""


class ProtocolTimeout(EngineError):
    """The engine did not answer within its deadline."""


@dataclass
class AnalysisRequest:
    """One position to analyse."""

    position_text: str
    limit: SearchLimit
    sequence_id: int


@dataclass
class AnalysisResult:
    """Outcome of one request.

    ``score``, ``pv`` and ``depth`` are the last ones the engine reported, which need
    not come from the line carrying the best move.
    """

    sequence_id: int
    score: Optional[float] = None
    best_move: Optional[str] = None
    pv: List[str] = field(default_factory=list)
    depth: Optional[int] = None
    timed_out: bool = False

    @property
    def resolved(self) -> bool:
        """True if the engine finished its search with a best move."""
        return self.best_move is not None


class EngineSession:
    """
    Single-connection UCI analysis session.

    Attributes:
        transport: Line transport to the engine
        config: Timeouts and engine settings
    """

    def __init__(self, transport: Transport, config: Optional[EngineConfig] = None):
        """
        Initialize the session. No traffic is sent until start() or analyze().

        Args:
            transport: Connected line transport
            config: Engine configuration (defaults if None)
        """
        self.transport = transport
        self.config = config or EngineConfig()

        self._lock = threading.Lock()
        self._phase = SessionPhase.UNINITIALIZED
        self._in_flight: Optional[AnalysisRequest] = None
        self._last_sequence_id = 0

    # -- State --------------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def in_flight(self) -> Optional[AnalysisRequest]:
        return self._in_flight

    @property
    def failed(self) -> bool:
        return self._phase is SessionPhase.FAILED

    # -- Handshake ----------------------------------------------------------

    def start(self):
        """
        Perform the UCI handshake if it has not happened yet.

        Raises:
            EngineUnavailableError: If the engine does not complete the
                handshake in time or the transport fails (session is FAILED)
            SessionBusyError: If another thread is handshaking or searching
        """
        with self._lock:
            if self._phase is SessionPhase.READY:
                return
            if self._phase is SessionPhase.FAILED:
                raise EngineUnavailableError("Engine session has failed")
            if self._phase is not SessionPhase.UNINITIALIZED:
                raise SessionBusyError(f"Session is {self._phase.value}")
            self._phase = SessionPhase.HANDSHAKING

        logger.info("Starting UCI handshake")
        try:
            self._send("uci")
            self._wait_for("uciok", self.config.handshake_timeout)
            self._send("isready")
            self._wait_for("readyok", self.config.handshake_timeout)
            self._send("ucinewgame")
        except (TransportError, ProtocolTimeout) as e:
            logger.error(f"Engine handshake failed: {e}")
            self._fail()
            raise EngineUnavailableError(f"Engine handshake failed: {e}") from e

        with self._lock:
            self._phase = SessionPhase.READY
        logger.info("Engine ready")

    def _wait_for(self, token: str, timeout: float):
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ProtocolTimeout(f"Timed out waiting for {token}")
            line = self._recv(min(remaining, self.config.poll_interval))
            if line is not None and token in line.split():
                return

    # -- Requests -----------------------------------------------------------

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyse one position and block until the request resolves.

        The request resolves when the engine prints ``bestmove``, when its
        deadline expires (partial score/PV, ``timed_out`` set, session
        FAILED) or when the transport breaks (session FAILED).

        Args:
            request: Position, search limit and sequence id

        Returns:
            AnalysisResult for ``request.sequence_id``

        Raises:
            EngineUnavailableError: If the session is (or becomes) unusable
                before the request could be sent
            SessionBusyError: If another request is in flight
            ValueError: If the sequence id does not increase
        """
        if self._phase is SessionPhase.UNINITIALIZED:
            self.start()

        with self._lock:
            if self._phase is SessionPhase.FAILED:
                raise EngineUnavailableError("Engine session has failed")
            if self._phase is not SessionPhase.READY:
                logger.warning(
                    f"Rejected request {request.sequence_id}: session is {self._phase.value}"
                )
                raise SessionBusyError(f"Session is {self._phase.value}")
            if request.sequence_id <= self._last_sequence_id:
                raise ValueError(
                    f"Stale request {request.sequence_id} "
                    f"(last was {self._last_sequence_id})"
                )
            self._phase = SessionPhase.BUSY
            self._in_flight = request
            self._last_sequence_id = request.sequence_id

        return self._search(request)

    def _search(self, request: AnalysisRequest) -> AnalysisResult:
        result = AnalysisResult(sequence_id=request.sequence_id)

        try:
            self._send("stop")
            self._send(f"position fen {request.position_text}")
            self._send(request.limit.go_command())
        except TransportError as e:
            logger.error(f"Failed to submit request {request.sequence_id}: {e}")
            self._fail()
            return result

        timeout = self.config.timeout_for(request.limit)
        deadline = time.monotonic() + timeout

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(
                    f"Engine timeout after {timeout:.1f}s on request "
                    f"{request.sequence_id}, resetting session"
                )
                result.timed_out = True
                self._fail()
                return result

            try:
                line = self._recv(min(remaining, self.config.poll_interval))
            except TransportError as e:
                logger.error(f"Engine connection lost during request {request.sequence_id}: {e}")
                self._fail()
                return result

            if line is None:
                continue

            reply = parse_reply_line(line)
            if reply.score is not None:
                result.score = reply.score
            if reply.pv:
                result.pv = reply.pv
            if reply.depth is not None:
                result.depth = reply.depth
            if reply.terminal:
                result.best_move = reply.best_move
                break

        with self._lock:
            self._phase = SessionPhase.READY
            self._in_flight = None

        logger.debug(
            f"Request {request.sequence_id} resolved at depth {result.depth}: "
            f"best={result.best_move}, "
            f"score={result.score}, pv={' '.join(result.pv[:5])}"
        )
        return result

    # -- Teardown -----------------------------------------------------------

    def _fail(self):
        with self._lock:
            self._phase = SessionPhase.FAILED
            self._in_flight = None
        self.transport.close()

    def close(self):
        """Ask the engine to quit and release the transport."""
        if self._phase is not SessionPhase.FAILED:
            try:
                self._send("quit")
            except TransportError as e:
                logger.debug(f"Could not send quit: {e}")
        self._fail()

    def __enter__(self) -> "EngineSession":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # -- Wire helpers -------------------------------------------------------

    def _send(self, command: str):
        logger.debug(f">>> {command}")
        self.transport.send(command)

    def _recv(self, timeout: float) -> Optional[str]:
        line = self.transport.recv(timeout)
        if line is not None:
            logger.debug(f"<<< {line}")
        return line
