"""
Line transports between the analysis client and a UCI engine.

A transport carries one command or reply per line, in order. The session
only needs three operations: send a line, wait (bounded) for the next
line, and close. SubprocessTransport runs the engine binary locally and
reads its stdout on a daemon thread so that waits can time out.
"""

import logging
import queue
import shutil
import subprocess
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """The engine connection broke (write failed or output closed)."""


class Transport(ABC):
    """Ordered, line-delimited duplex channel to an engine."""

    @abstractmethod
    def send(self, line: str) -> None:
        """
        Write one command line.

        Raises:
            TransportError: If the line could not be delivered
        """

    @abstractmethod
    def recv(self, timeout: float) -> Optional[str]:
        """
        Wait for the next reply line.

        Args:
            timeout: Seconds to wait

        Returns:
            The line without its terminator, or None if nothing arrived in time

        Raises:
            TransportError: If the engine closed its output
        """

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Safe to call more than once."""


def find_engine(candidates: Optional[List[str]] = None) -> str:
    """
    Auto-detect a Stockfish binary.

    Returns:
        Path to the binary

    Raises:
        FileNotFoundError: If no candidate is found
    """
    candidates = candidates or [
        "stockfish",
        "/usr/local/bin/stockfish",
        "/usr/bin/stockfish",
        "/usr/games/stockfish",
        "/opt/homebrew/bin/stockfish",
    ]

    for candidate in candidates:
        path = shutil.which(candidate)
        if path:
            return path

    raise FileNotFoundError(
        "Stockfish not found. Install with: brew install stockfish (macOS) "
        "or apt install stockfish (Linux)"
    )


_EOF = object()


class SubprocessTransport(Transport):
    """Transport over the stdin/stdout pipes of a spawned engine process."""

    def __init__(self, engine_path: Optional[str] = None):
        """
        Spawn the engine.

        Args:
            engine_path: Path to the engine binary (None = auto-detect)

        Raises:
            FileNotFoundError: If the binary does not exist
        """
        if engine_path is None:
            engine_path = find_engine()

        if not Path(engine_path).exists() and shutil.which(engine_path) is None:
            raise FileNotFoundError(f"Engine binary not found at: {engine_path}")

        self.engine_path = engine_path
        self._lines: "queue.Queue[object]" = queue.Queue()
        self._closed = False

        self.process = subprocess.Popen(
            [engine_path],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            bufsize=1,
        )
        self._reader = threading.Thread(target=self._read_output, daemon=True)
        self._reader.start()

        logger.info(f"Started engine process: {engine_path} (pid={self.process.pid})")

    def _read_output(self):
        for line in self.process.stdout:
            self._lines.put(line.rstrip("\r\n"))
        self._lines.put(_EOF)

    def send(self, line: str) -> None:
        if self._closed:
            raise TransportError("Transport is closed")
        try:
            self.process.stdin.write(line + "\n")
            self.process.stdin.flush()
        except (BrokenPipeError, OSError, ValueError) as e:
            raise TransportError(f"Failed to write to engine: {e}") from e

    def recv(self, timeout: float) -> Optional[str]:
        try:
            item = self._lines.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _EOF:
            # Keep reporting EOF to later callers
            self._lines.put(_EOF)
            raise TransportError("Engine closed its output")
        return item

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.process.stdin.close()
        except OSError:
            pass
        self.process.terminate()
        try:
            self.process.wait(timeout=1.0)
        except subprocess.TimeoutExpired:
            logger.warning("Engine did not exit after terminate, killing it")
            self.process.kill()
        logger.info(f"Engine process stopped: {self.engine_path}")
