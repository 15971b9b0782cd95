#!/usr/bin/env python3
"""
CLI tool for analysing chess game transcripts.

Usage:
    python tools/analyze_game.py analyze \\
        --pgn games/my_game.pgn \\
        --depth 13

    python tools/analyze_game.py analyze \\
        --pgn games/my_game.pgn \\
        --movetime 500 \\
        --engine /usr/local/bin/stockfish

    python tools/analyze_game.py position \\
        --pgn games/my_game.pgn \\
        --ply 24

    python tools/analyze_game.py position \\
        --fen "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_analyzer.analysis import (
    AnalysisConfig,
    AnalysisOrchestrator,
    PVNavigator,
    ReplayCursor,
)
from chess_analyzer.board import decode_placement
from chess_analyzer.data.pgn_parser import Transcript, load_transcript
from chess_analyzer.evaluation import (
    EvalSeries,
    eval_to_fraction,
    format_score,
    material_series,
)
from chess_analyzer.uci import EngineConfig, EngineSession, SearchLimit, SubprocessTransport

BAR_WIDTH = 20

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_orchestrator(args) -> AnalysisOrchestrator:
    """Create an orchestrator from command-line options."""
    if args.movetime is not None:
        limit = SearchLimit.time_limit(args.movetime)
    else:
        limit = SearchLimit.depth_limit(args.depth)

    engine_config = EngineConfig(engine_path=args.engine)

    def session_factory() -> EngineSession:
        return EngineSession(SubprocessTransport(engine_config.engine_path), engine_config)

    return AnalysisOrchestrator(session_factory, AnalysisConfig(limit=limit))


def read_transcript(pgn: str) -> Transcript:
    pgn_path = Path(pgn)
    if not pgn_path.exists():
        print(f"Error: PGN file not found: {pgn_path}")
        sys.exit(1)
    return load_transcript(pgn_path)


def render_bar(score) -> str:
    """White's share of a fixed-width bar, '#' for White and '.' for Black."""
    filled = round(eval_to_fraction(score) * BAR_WIDTH)
    return "#" * filled + "." * (BAR_WIDTH - filled)


def print_series(transcript: Transcript, series: EvalSeries):
    headers = transcript.headers
    if headers:
        print(f"\n{headers.get('White', '?')} vs {headers.get('Black', '?')}"
              f"  ({headers.get('Result', '*')})")
    print(f"Source: {series.source}\n")

    print(f"{'Ply':>4}  {'Move':<8}  {'Score':>7}  Bar")
    print("-" * (25 + BAR_WIDTH))
    for ply, (move, score) in enumerate(zip(transcript.moves, series.scores), start=1):
        print(f"{ply:>4}  {move:<8}  {format_score(score):>7}  {render_bar(score)}")

    if not series.complete:
        print(f"\nStopped at token {series.stopped_at + 1}: {series.failed_token!r}")


def analyze_game(args):
    """Score every ply of a transcript."""
    transcript = read_transcript(args.pgn)

    if not transcript.moves:
        print("Error: No moves found in transcript")
        sys.exit(1)

    if args.material_only:
        series = material_series(transcript.moves)
    elif transcript.has_evals and not args.force_engine:
        logger.info("Using evaluations embedded in the transcript")
        series = EvalSeries(scores=transcript.evals, source="embedded")
    else:
        with build_orchestrator(args) as orchestrator:
            with tqdm(total=len(transcript.moves), desc="Analysing", unit="ply") as progress:

                def on_progress(done, total):
                    progress.update(done - progress.n)

                series = orchestrator.analyze_game(transcript.moves, on_progress=on_progress)

    if series is None:
        print("Analysis was cancelled")
        sys.exit(1)

    print_series(transcript, series)


def analyze_position(args):
    """Show the engine's verdict and main line at one ply or FEN."""
    if args.fen:
        position = decode_placement(args.fen)
        print(f"\nPosition: {args.fen}")
    else:
        transcript = read_transcript(args.pgn)
        cursor = ReplayCursor(transcript.moves)
        state = cursor.jump(args.ply)
        if state.failed_token is not None:
            print(f"Warning: replay stopped at {state.failed_token!r}")
        position = state.position
        print(f"\n{cursor.status()}  (last move: {cursor.current_move or '-'})")

    print(repr(position))

    with build_orchestrator(args) as orchestrator:
        analysis = orchestrator.analyze_position(position)

    print(f"\nScore:     {format_score(analysis.score, digits=2)}")
    print(f"Best move: {analysis.best_move or '-'}")
    print(f"PV:        {' '.join(analysis.pv) or '-'}")

    navigator = PVNavigator(position, analysis.pv, orchestrator.config.max_pv_length)
    while not navigator.at_end:
        step = navigator.step(1)
        print(f"\nPV {navigator.index}: {navigator.current_move}")
        print(repr(step))


def add_engine_arguments(parser):
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        help="Path to UCI engine binary (default: auto-detect stockfish)",
    )
    limit = parser.add_mutually_exclusive_group()
    limit.add_argument(
        "--depth",
        type=int,
        default=13,
        help="Search depth per position",
    )
    limit.add_argument(
        "--movetime",
        type=int,
        default=None,
        help="Search time per position in milliseconds",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging (includes engine traffic)",
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Analyse chess game transcripts with a UCI engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    game_parser = subparsers.add_parser("analyze", help="Score every ply of a game")
    game_parser.add_argument(
        "--pgn",
        required=True,
        help="PGN transcript to analyse",
    )
    add_engine_arguments(game_parser)
    game_parser.add_argument(
        "--material-only",
        action="store_true",
        help="Skip the engine and use the material evaluator",
    )
    game_parser.add_argument(
        "--force-engine",
        action="store_true",
        help="Run the engine even if the transcript carries %%eval annotations",
    )

    position_parser = subparsers.add_parser("position", help="Analyse one position")
    source = position_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--pgn",
        help="PGN transcript to replay",
    )
    source.add_argument(
        "--fen",
        help="Position to analyse directly (placement and side fields are used)",
    )
    add_engine_arguments(position_parser)
    position_parser.add_argument(
        "--ply",
        type=int,
        default=0,
        help="Number of plies to replay before analysing (with --pgn)",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    setup_logging(verbose=args.verbose)

    try:
        if args.command == "analyze":
            analyze_game(args)
        elif args.command == "position":
            analyze_position(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
