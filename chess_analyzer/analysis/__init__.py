"""
Analysis Module

Game-level analysis on top of the board model and the UCI client.

Key Components:
    - AnalysisOrchestrator: Scores every ply of a transcript with the engine,
      falling back to material evaluation when no engine is available
    - AnalysisConfig: Search limit and PV settings
    - ReplayCursor / position_at: Navigation through a transcript
    - PVNavigator: Stepping through an engine principal variation
"""

from chess_analyzer.analysis.config import AnalysisConfig
from chess_analyzer.analysis.orchestrator import AnalysisOrchestrator, PositionAnalysis
from chess_analyzer.analysis.replay import PVNavigator, ReplayCursor, ReplayState, position_at

__all__ = [
    'AnalysisConfig',
    'AnalysisOrchestrator',
    'PositionAnalysis',
    'PVNavigator',
    'ReplayCursor',
    'ReplayState',
    'position_at',
]
