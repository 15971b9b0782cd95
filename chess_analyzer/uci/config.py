"""
Engine and search configuration.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SearchLimit:
    """How long the engine may search one position.

    Exactly one of ``depth`` and ``movetime_ms`` is set.
    """

    depth: Optional[int] = None
    """Search depth in plies (``go depth N``)"""

    movetime_ms: Optional[int] = None
    """Search time in milliseconds (``go movetime N``)"""

    def __post_init__(self):
        """Validate that exactly one bound is set and positive."""
        if (self.depth is None) == (self.movetime_ms is None):
            raise ValueError(
                f"Exactly one of depth and movetime_ms must be set, "
                f"got depth={self.depth}, movetime_ms={self.movetime_ms}"
            )
        if self.depth is not None and self.depth <= 0:
            raise ValueError(f"depth must be positive, got {self.depth}")
        if self.movetime_ms is not None and self.movetime_ms <= 0:
            raise ValueError(f"movetime_ms must be positive, got {self.movetime_ms}")

    @classmethod
    def depth_limit(cls, depth: int) -> "SearchLimit":
        return cls(depth=depth)

    @classmethod
    def time_limit(cls, movetime_ms: int) -> "SearchLimit":
        return cls(movetime_ms=movetime_ms)

    @property
    def is_timed(self) -> bool:
        return self.movetime_ms is not None

    def go_command(self) -> str:
        """The UCI ``go`` command for this limit."""
        if self.is_timed:
            return f"go movetime {self.movetime_ms}"
        return f"go depth {self.depth}"


@dataclass
class EngineConfig:
    """Configuration for an engine session.

    Timeouts are in seconds.
    """

    engine_path: Optional[str] = None
    """Path to the engine binary (None = auto-detect stockfish)"""

    handshake_timeout: float = 4.0
    """Wait for ``uciok`` and for ``readyok``, each"""

    depth_timeout: float = 15.0
    """Deadline for depth-bounded searches, which have no intrinsic bound"""

    movetime_grace: float = 3.0
    """Added to the movetime of timed searches to form their deadline"""

    poll_interval: float = 0.1
    """Longest single wait on the transport before re-checking the deadline"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        for name in ("handshake_timeout", "depth_timeout", "poll_interval"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.movetime_grace < 0:
            raise ValueError(f"movetime_grace must be non-negative, got {self.movetime_grace}")

    def timeout_for(self, limit: SearchLimit) -> float:
        """Deadline in seconds for a search under ``limit``."""
        if limit.is_timed:
            return limit.movetime_ms / 1000 + self.movetime_grace
        return self.depth_timeout
