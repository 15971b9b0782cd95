"""
Analysis orchestrator: walks a transcript and has the engine score each ply.

Pipeline Flow:
    tokens → apply_san(position) → encode_position() → EngineSession.analyze()
           → AnalysisResult.score → EvalSeries

Only the most recent run is allowed to deliver a result. Every run takes
the next run id; before each ply and after each engine reply the run
compares its id with the latest one and quietly returns None once it has
been superseded (by a newer analyze_game() or by cancel()).

The orchestrator owns at most one EngineSession. Sessions are built on
demand through ``session_factory`` and thrown away once they fail; the next
request builds a fresh one. When no session can be established at the
start of a run the whole transcript is scored by the material evaluator
instead.
"""

import itertools
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from chess_analyzer.analysis.config import AnalysisConfig
from chess_analyzer.board.fen import encode_position
from chess_analyzer.board.representation import Position
from chess_analyzer.board.san import apply_san
from chess_analyzer.data.pgn_parser import is_result_token
from chess_analyzer.evaluation.base import Evaluator
from chess_analyzer.evaluation.material import MaterialEvaluator, material_series
from chess_analyzer.evaluation.series import EvalSeries
from chess_analyzer.uci.session import (
    AnalysisRequest,
    AnalysisResult,
    EngineError,
    EngineSession,
    EngineUnavailableError,
    SessionBusyError,
)
from chess_analyzer.uci.transport import TransportError

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], EngineSession]
ProgressCallback = Callable[[int, int], None]


@dataclass
class PositionAnalysis:
    """Engine verdict on a single position."""

    score: Optional[float] = None
    best_move: Optional[str] = None
    pv: List[str] = field(default_factory=list)


class AnalysisOrchestrator:
    """
    Drives an engine session over whole games and single positions.

    Example:
        >>> orchestrator = AnalysisOrchestrator(
        ...     lambda: EngineSession(SubprocessTransport()),
        ...     AnalysisConfig(limit=SearchLimit(depth=12)),
        ... )
        >>> series = orchestrator.analyze_game(["e4", "e5", "Nf3"])
        >>> series.scores
        [0.31, 0.28, 0.35]
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        config: Optional[AnalysisConfig] = None,
        evaluator: Optional[Evaluator] = None,
    ):
        """
        Initialize the orchestrator. No engine is started until first use.

        Args:
            session_factory: Builds a new, unstarted EngineSession
            config: Analysis configuration (uses defaults if None)
            evaluator: Fallback evaluator (default: MaterialEvaluator)
        """
        self.session_factory = session_factory
        self.config = config or AnalysisConfig()
        self.evaluator = evaluator or MaterialEvaluator()

        self._session: Optional[EngineSession] = None
        self._session_lock = threading.Lock()

        self._run_lock = threading.Lock()
        self._run_id = 0
        self._sequence_ids = itertools.count(1)

    # -- Run ids ------------------------------------------------------------

    def _begin_run(self) -> int:
        with self._run_lock:
            self._run_id += 1
            return self._run_id

    def _is_current(self, run_id: Optional[int]) -> bool:
        if run_id is None:
            return True
        with self._run_lock:
            return run_id == self._run_id

    def _next_sequence_id(self) -> int:
        with self._run_lock:
            return next(self._sequence_ids)

    def cancel(self):
        """Supersede any analysis in progress."""
        run_id = self._begin_run()
        logger.debug(f"Cancelled analysis runs before {run_id}")

    # -- Session handling ---------------------------------------------------

    def _acquire_session(self) -> Optional[EngineSession]:
        """
        Return a usable session, building one if needed.

        Returns:
            The session, or None if the engine cannot be started
        """
        with self._session_lock:
            if self._session is not None and not self._session.failed:
                return self._session

            if self._session is not None:
                logger.info("Discarding failed engine session")
                self._session = None

            try:
                session = self.session_factory()
                session.start()
            except (EngineError, TransportError, OSError) as e:
                logger.warning(f"Engine unavailable: {e}")
                return None

            self._session = session
            return session

    def _request(
        self, position_text: str, run_id: Optional[int] = None
    ) -> Optional[AnalysisResult]:
        """
        Submit one position, waiting while another request holds the session.

        Args:
            position_text: FEN text of the position
            run_id: Run the request belongs to (None = never superseded)

        Returns:
            The result, or None if the engine is unavailable or the run was
            superseded while waiting
        """
        while self._is_current(run_id):
            session = self._acquire_session()
            if session is None:
                return None

            request = AnalysisRequest(
                position_text=position_text,
                limit=self.config.limit,
                sequence_id=self._next_sequence_id(),
            )
            try:
                return session.analyze(request)
            except SessionBusyError:
                time.sleep(self.config.busy_poll_interval)
            except EngineUnavailableError as e:
                logger.warning(f"Request {request.sequence_id} not sent: {e}")
                return None
            except ValueError:
                # Another thread submitted a later id first; take a fresh one
                logger.debug(f"Request {request.sequence_id} overtaken, retrying")

        return None

    # -- Public API ---------------------------------------------------------

    def analyze_game(
        self,
        tokens: Iterable[str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> Optional[EvalSeries]:
        """
        Score every ply of a transcript.

        Args:
            tokens: SAN move tokens in play order
            on_progress: Called as ``on_progress(plies_scored, total_tokens)``
                after each engine-scored ply, or once when the material
                fallback has scored the whole transcript

        Returns:
            EvalSeries (``source`` is "engine" or "material"), or None if a
            newer run superseded this one
        """
        run_id = self._begin_run()
        tokens = list(tokens)

        if self._acquire_session() is None:
            logger.warning("Falling back to material evaluation")
            series = material_series(tokens, self.evaluator)
            if not self._is_current(run_id):
                return None
            if on_progress is not None:
                on_progress(len(series), len(tokens))
            return series

        logger.info(f"Analysing {len(tokens)} tokens (run {run_id})")
        series = EvalSeries(source="engine")
        position = Position.initial()

        for index, token in enumerate(tokens):
            if not self._is_current(run_id):
                logger.debug(f"Run {run_id} superseded before token {index + 1}")
                return None

            if not token:
                continue
            if is_result_token(token):
                break
            if not apply_san(position, token):
                logger.warning(f"Replay stopped at token {index + 1} ({token!r})")
                series.stopped_at = index
                series.failed_token = token
                break

            result = self._request(encode_position(position), run_id)

            if not self._is_current(run_id):
                logger.debug(f"Run {run_id} superseded after token {index + 1}")
                return None

            if result is None or result.score is None:
                series.scores.append(0.0)
            else:
                series.scores.append(result.score)

            if on_progress is not None:
                on_progress(len(series.scores), len(tokens))

        logger.info(f"Run {run_id} complete: {len(series)} plies scored")
        return series

    def analyze_position(self, position: Position) -> PositionAnalysis:
        """
        Ask the engine for the score, best move and main line of a position.

        Falls back to the static evaluator (no best move, no PV) when the
        engine cannot be reached.

        Args:
            position: Position to analyse (not modified)

        Returns:
            PositionAnalysis with the PV truncated to ``config.max_pv_length``
        """
        result = self._request(encode_position(position))

        if result is None:
            return PositionAnalysis(score=self.evaluator.evaluate(position))

        return PositionAnalysis(
            score=result.score,
            best_move=result.best_move,
            pv=result.pv[: self.config.max_pv_length],
        )

    def close(self):
        """Cancel running analysis and shut the engine down."""
        self.cancel()
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def __enter__(self) -> "AnalysisOrchestrator":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
