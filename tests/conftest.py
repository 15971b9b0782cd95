"""
Shared fixtures: a scripted in-memory UCI engine and fast timeouts.
"""

import queue
import threading
from typing import Iterable, List, Optional

import pytest

from chess_analyzer.uci.config import EngineConfig
from chess_analyzer.uci.transport import Transport, TransportError

_EOF = object()

DEFAULT_SEARCH = ["info depth 1 score cp 25 pv e2e4 e7e5", "bestmove e2e4 ponder e7e5"]


class FakeEngine(Transport):
    """
    In-memory Transport that answers like a UCI engine.

    Args:
        searches: Reply lines for successive ``go`` commands; the last entry
            is reused once the list runs out
        answer_uci: Reply 'uciok' to 'uci'
        answer_isready: Reply 'readyok' to 'isready'
        hold_search: Event that must be set before ``go`` replies are released
    """

    def __init__(
        self,
        searches: Optional[List[List[str]]] = None,
        answer_uci: bool = True,
        answer_isready: bool = True,
        hold_search: Optional[threading.Event] = None,
    ):
        self.searches = searches or [DEFAULT_SEARCH]
        self.answer_uci = answer_uci
        self.answer_isready = answer_isready
        self.hold_search = hold_search

        self.sent: List[str] = []
        self.closed = False
        self.fail_on_send = False
        self.eof_after_search = False
        self._search_index = 0
        self._lines: "queue.Queue[object]" = queue.Queue()

    @property
    def positions(self) -> List[str]:
        """FEN texts of every 'position fen' command sent."""
        prefix = "position fen "
        return [line[len(prefix):] for line in self.sent if line.startswith(prefix)]

    def _reply(self, lines: Iterable[str]):
        for line in lines:
            self._lines.put(line)

    def _release_search(self):
        index = min(self._search_index, len(self.searches) - 1)
        self._search_index += 1
        self._reply(self.searches[index])
        if self.eof_after_search:
            self._lines.put(_EOF)

    def send(self, line: str) -> None:
        if self.closed or self.fail_on_send:
            raise TransportError("Broken pipe")
        self.sent.append(line)

        if line == "uci" and self.answer_uci:
            self._reply(["id name FakeFish", "id author Tests", "uciok"])
        elif line == "isready" and self.answer_isready:
            self._reply(["readyok"])
        elif line.startswith("go"):
            if self.hold_search is None:
                self._release_search()
            else:
                threading.Thread(target=self._release_when_set, daemon=True).start()

    def _release_when_set(self):
        self.hold_search.wait()
        self._release_search()

    def recv(self, timeout: float) -> Optional[str]:
        try:
            item = self._lines.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _EOF:
            self._lines.put(_EOF)
            raise TransportError("Engine closed its output")
        return item

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fast_config():
    """Engine configuration with short timeouts so failure paths run quickly."""
    return EngineConfig(
        handshake_timeout=0.2,
        depth_timeout=0.3,
        movetime_grace=0.1,
        poll_interval=0.01,
    )


@pytest.fixture
def fake_engine():
    """A cooperative fake engine with the default search reply."""
    return FakeEngine()
