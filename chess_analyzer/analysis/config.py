"""
Analysis configuration.
"""

from dataclasses import dataclass, field

from chess_analyzer.uci.config import SearchLimit

MAX_PV_LENGTH = 16


@dataclass
class AnalysisConfig:
    """Configuration for game and position analysis.

    Engine-level timeouts live in EngineConfig, which the session factory
    carries; this covers what the orchestrator itself decides.
    """

    limit: SearchLimit = field(default_factory=lambda: SearchLimit(depth=13))
    """Search limit sent with every request"""

    max_pv_length: int = MAX_PV_LENGTH
    """Principal variations are truncated to this many moves"""

    busy_poll_interval: float = 0.1
    """Seconds between retries while another request holds the session"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.limit, SearchLimit):
            raise TypeError(f"limit must be a SearchLimit, got {type(self.limit).__name__}")
        if self.max_pv_length <= 0:
            raise ValueError(f"max_pv_length must be positive, got {self.max_pv_length}")
        if self.busy_poll_interval <= 0:
            raise ValueError(
                f"busy_poll_interval must be positive, got {self.busy_poll_interval}"
            )
