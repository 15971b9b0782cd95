"""
Tests for the PGN transcript parser.

Tests cleaning of movetext into SAN tokens, header extraction and
embedded evaluation annotations.
"""

import pytest

from chess_analyzer.data import (
    extract_evals,
    extract_headers,
    extract_moves,
    is_result_token,
    load_transcript,
    parse_transcript,
)
from chess_analyzer.data.pgn_parser import parse_eval_annotation

SAMPLE_PGN = """[Event "Casual Game"]
[Site "Paris FRA"]
[Date "1858.??.??"]
[White "Morphy, Paul"]
[Black "Duke Karl / Count Isouard"]
[Result "1-0"]

1. e4 {[%eval 0.3]} e5 {[%eval 0.25]} 2. Nf3 {[%eval 0.31]} d6 {[%eval 0.55]}
3. d4 {[%eval 0.52]} Bg4?! {[%eval 1.2] [%clk 0:04:59]} 1-0
"""


@pytest.fixture
def sample_pgn_file(tmp_path):
    """Write the sample game to a temporary file."""
    pgn_path = tmp_path / "opera.pgn"
    pgn_path.write_text(SAMPLE_PGN)
    return pgn_path


class TestExtractMoves:
    """Test movetext cleaning."""

    def test_simple_movetext(self):
        assert extract_moves("1. e4 e5 2. Nf3 {best by test} Nc6 1-0") == [
            "e4",
            "e5",
            "Nf3",
            "Nc6",
        ]

    def test_compact_move_numbers(self):
        assert extract_moves("1.e4 e5 2.Nf3 Nc6 *") == ["e4", "e5", "Nf3", "Nc6"]

    def test_black_move_numbers(self):
        assert extract_moves("1. e4 {comment} 1... c5 2. Nf3") == ["e4", "c5", "Nf3"]

    def test_nested_variations(self):
        text = "1. e4 (1. d4 d5 (1... Nf6 2. c4) 2. c4) 1... e5 (1... c5) 2. Nf3"

        assert extract_moves(text) == ["e4", "e5", "Nf3"]

    def test_nags_and_line_comments(self):
        text = "1. e4 $1 e5 $2 ; a rest-of-line comment\n2. Nf3 Nc6 1/2-1/2"

        assert extract_moves(text) == ["e4", "e5", "Nf3", "Nc6"]

    def test_tags_removed(self):
        assert extract_moves(SAMPLE_PGN) == ["e4", "e5", "Nf3", "d6", "d4", "Bg4?!"]

    def test_castling_and_promotion_kept(self):
        assert extract_moves("30. O-O-O e1=Q+ 31. Rxd8# 1-0") == ["O-O-O", "e1=Q+", "Rxd8#"]

    def test_empty(self):
        assert extract_moves("") == []


class TestHeaders:
    def test_headers(self):
        headers = extract_headers(SAMPLE_PGN)

        assert headers["White"] == "Morphy, Paul"
        assert headers["Result"] == "1-0"

    def test_no_game(self):
        assert extract_headers("") == {}


class TestEvals:
    """Test embedded %eval annotations."""

    def test_bracketed_evals(self):
        assert extract_evals(SAMPLE_PGN) == pytest.approx([0.3, 0.25, 0.31, 0.55, 0.52, 1.2])

    def test_mate_annotations(self):
        text = "1. f3 {[%eval -0.5]} e5 {[%eval -0.6]} 2. g4 {[%eval #-1]} Qh4# {[%eval #0]}"

        assert extract_evals(text) == pytest.approx([-0.5, -0.6, -99.0, 99.0])

    def test_unbracketed_eval(self):
        assert extract_evals("1. e4 { %eval -1.5 } e5") == [-1.5]

    def test_variation_evals_ignored(self):
        """Test that annotated side lines do not shift the main-line series."""
        text = "1. e4 { [%eval 0.3] } ( 1. d4 { [%eval 0.2] } ) 1... e5 { [%eval 0.25] } *"

        transcript = parse_transcript(text)

        assert transcript.moves == ["e4", "e5"]
        assert transcript.evals == pytest.approx([0.3, 0.25])

    def test_nested_variation_evals_ignored(self):
        text = (
            "1. e4 {[%eval 0.3]} (1. d4 {[%eval 0.2]} d5 (1... Nf6 {[%eval 0.25]}) "
            "2. c4 {[%eval 0.3]}) 1... c5 {[%eval 0.35]} *"
        )

        assert extract_evals(text) == pytest.approx([0.3, 0.35])

    def test_parentheses_in_comments_are_not_variations(self):
        text = "1. e4 {[%eval 0.3] (a smiley :)} e5 {[%eval 0.25]} *"

        assert extract_evals(text) == pytest.approx([0.3, 0.25])

    def test_annotation_values(self):
        assert parse_eval_annotation("#4") == 99.0
        assert parse_eval_annotation("#-2") == -99.0
        assert parse_eval_annotation("0.17") == pytest.approx(0.17)
        assert parse_eval_annotation("?") is None


class TestTranscript:
    def test_parse_transcript(self):
        transcript = parse_transcript(SAMPLE_PGN)

        assert transcript.headers["Black"] == "Duke Karl / Count Isouard"
        assert len(transcript.moves) == 6
        assert transcript.has_evals

    def test_plain_transcript_has_no_evals(self):
        transcript = parse_transcript("1. d4 d5 2. c4 *")

        assert transcript.moves == ["d4", "d5", "c4"]
        assert not transcript.has_evals

    def test_load_transcript(self, sample_pgn_file):
        transcript = load_transcript(sample_pgn_file)

        assert transcript.moves[0] == "e4"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_transcript(tmp_path / "missing.pgn")

    @pytest.mark.parametrize("token", ["1-0", "0-1", "1/2-1/2", "*"])
    def test_result_tokens(self, token):
        assert is_result_token(token)

    def test_move_is_not_result(self):
        assert not is_result_token("e4")
