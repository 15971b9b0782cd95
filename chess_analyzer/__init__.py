"""
Chess Analyzer

Replays chess game transcripts and has an external UCI engine (Stockfish)
score every position, with a material-based fallback when no engine is
available.

## Architecture

1. **board**: Position model and move interpreters
   - 64-square board with side to move
   - SAN (transcript) and long-algebraic (engine) move application
   - FEN encoding for the engine

2. **uci**: UCI client
   - Line transport to the engine process
   - Handshake, single-flight requests, timeouts
   - Parsing of score / pv / bestmove lines

3. **analysis**: Game analysis
   - AnalysisOrchestrator: per-ply scoring with cancellation
   - ReplayCursor and PVNavigator

4. **evaluation**: Scores without an engine
   - MaterialEvaluator: material + piece-square tables
   - Eval-to-fraction mapping for display

5. **data**: PGN transcript parsing

## Quick Start

```python
from pathlib import Path

from chess_analyzer.analysis import AnalysisOrchestrator
from chess_analyzer.data import load_transcript
from chess_analyzer.uci import EngineSession, SubprocessTransport

transcript = load_transcript(Path("game.pgn"))
orchestrator = AnalysisOrchestrator(lambda: EngineSession(SubprocessTransport()))
series = orchestrator.analyze_game(transcript.moves)
print(series.scores)
orchestrator.close()
```

### From the command line

```bash
python tools/analyze_game.py analyze --pgn game.pgn --depth 13
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__author__ = "Alix Muller"
__license__ = "MIT"

from chess_analyzer.analysis import AnalysisConfig, AnalysisOrchestrator
from chess_analyzer.board import Position, apply_san, encode_position
from chess_analyzer.evaluation import EvalSeries, MaterialEvaluator, eval_to_fraction
from chess_analyzer.uci import EngineSession, SearchLimit, SubprocessTransport

__all__ = [
    'AnalysisConfig',
    'AnalysisOrchestrator',
    'Position',
    'apply_san',
    'encode_position',
    'EvalSeries',
    'MaterialEvaluator',
    'eval_to_fraction',
    'EngineSession',
    'SearchLimit',
    'SubprocessTransport',
]
