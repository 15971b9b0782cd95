"""
Unit Tests for the SAN Interpreter

python-chess serves as the reference for piece placement after each ply.
"""

import chess
import pytest

from chess_analyzer.board import (
    Color,
    Piece,
    PieceType,
    Position,
    apply_san,
    decode_placement,
)
from chess_analyzer.board.fen import encode_placement

# Morphy vs Duke Karl / Count Isouard, Paris 1858
OPERA_GAME = (
    "e4 e5 Nf3 d6 d4 Bg4 dxe5 Bxf3 Qxf3 dxe5 Bc4 Nf6 Qb3 Qe7 Nc3 c6 Bg5 b5 "
    "Nxb5 cxb5 Bxb5+ Nbd7 O-O-O Rd8 Rxd7 Rxd7 Rd1 Qe6 Bxd7+ Nxd7 Qb8+ Nxb8 Rd8#"
).split()


@pytest.fixture
def position():
    """Fresh initial position."""
    return Position.initial()


def play(position, moves):
    for san in moves:
        assert apply_san(position, san), f"Could not apply {san}"
    return position


class TestAgainstReference:
    """Replays compared with python-chess after every ply."""

    def test_opera_game(self, position):
        board = chess.Board()

        for san in OPERA_GAME:
            assert apply_san(position, san), f"Could not apply {san}"
            board.push_san(san)
            assert encode_placement(position) == board.board_fen(), f"Mismatch after {san}"

    def test_side_to_move_alternates(self, position):
        play(position, ["e4", "e5", "Nf3"])

        assert position.side_to_move is Color.BLACK


class TestPawnMoves:
    def test_single_and_double_push(self, position):
        play(position, ["e3", "d5"])

        assert position.get("e3") == Piece(Color.WHITE, PieceType.PAWN)
        assert position.get("d5") == Piece(Color.BLACK, PieceType.PAWN)
        assert position.get("d7") is None

    def test_blocked_double_push(self):
        position = decode_placement("4k3/8/8/8/8/4n3/4P3/4K3 w")

        assert not apply_san(position, "e4")

    def test_capture(self, position):
        play(position, ["e4", "d5", "exd5"])

        assert position.get("d5") == Piece(Color.WHITE, PieceType.PAWN)
        assert position.get("e4") is None
        assert position.piece_count() == 31

    def test_en_passant(self, position):
        """Test that the passed pawn is removed."""
        play(position, ["e4", "a6", "e5", "d5", "exd6"])

        assert position.get("d6") == Piece(Color.WHITE, PieceType.PAWN)
        assert position.get("d5") is None
        assert position.get("e5") is None
        assert position.piece_count() == 31

    def test_black_en_passant(self, position):
        play(position, ["a3", "d5", "a4", "d4", "e4", "dxe3"])

        assert position.get("e3") == Piece(Color.BLACK, PieceType.PAWN)
        assert position.get("e4") is None

    @pytest.mark.parametrize("token", ["a8=Q", "a8Q", "a8=Q+"])
    def test_promotion(self, token):
        position = decode_placement("8/P7/8/8/8/8/8/k6K w")

        assert apply_san(position, token)

        assert position.get("a8") == Piece(Color.WHITE, PieceType.QUEEN)
        assert position.get("a7") is None

    def test_capture_promotion(self):
        position = decode_placement("r6k/1P6/8/8/8/8/8/7K w")

        assert apply_san(position, "bxa8=N")

        assert position.get("a8") == Piece(Color.WHITE, PieceType.KNIGHT)

    def test_black_promotion(self):
        position = decode_placement("7k/8/8/8/8/8/p7/7K b")

        assert apply_san(position, "a1=R")

        assert position.get("a1") == Piece(Color.BLACK, PieceType.ROOK)


class TestCastling:
    def test_white_kingside(self, position):
        play(position, ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5"])

        assert apply_san(position, "O-O")

        assert position.get("g1") == Piece(Color.WHITE, PieceType.KING)
        assert position.get("f1") == Piece(Color.WHITE, PieceType.ROOK)
        assert position.get("e1") is None
        assert position.get("h1") is None

    def test_black_queenside_with_zeros(self):
        position = decode_placement("r3k3/8/8/8/8/8/8/4K3 b")

        assert apply_san(position, "0-0-0+")

        assert position.get("c8") == Piece(Color.BLACK, PieceType.KING)
        assert position.get("d8") == Piece(Color.BLACK, PieceType.ROOK)

    def test_castling_without_rook_fails(self):
        position = decode_placement("4k3/8/8/8/8/8/8/4K3 w")

        assert not apply_san(position, "O-O")
        assert position.get("e1") == Piece(Color.WHITE, PieceType.KING)
        assert position.side_to_move is Color.WHITE


class TestDisambiguation:
    def test_file_hint(self):
        position = decode_placement("4k3/8/8/8/8/8/8/1N2KN2 w")

        assert apply_san(position, "Nfd2")

        assert position.get("d2") == Piece(Color.WHITE, PieceType.KNIGHT)
        assert position.get("b1") == Piece(Color.WHITE, PieceType.KNIGHT)
        assert position.get("f1") is None

    def test_rank_hint(self):
        position = decode_placement("4k3/8/8/8/8/R7/8/R3K3 w")

        assert apply_san(position, "R1a2")

        assert position.get("a2") == Piece(Color.WHITE, PieceType.ROOK)
        assert position.get("a3") == Piece(Color.WHITE, PieceType.ROOK)
        assert position.get("a1") is None

    def test_blocked_piece_is_not_a_candidate(self):
        """Test that a rook behind another piece is skipped."""
        position = decode_placement("4k3/8/8/8/8/8/8/R1N1K2R w")

        assert apply_san(position, "Rf1")

        assert position.get("f1") == Piece(Color.WHITE, PieceType.ROOK)
        assert position.get("h1") is None
        assert position.get("a1") == Piece(Color.WHITE, PieceType.ROOK)

    def test_ambiguous_token_takes_first_in_scan_order(self):
        """Test that without a hint the candidate nearest rank 8 moves."""
        position = decode_placement("4k3/8/8/8/8/5N2/8/1N2K3 w")

        assert apply_san(position, "Nd2")

        assert position.get("f3") is None
        assert position.get("b1") == Piece(Color.WHITE, PieceType.KNIGHT)


class TestFailures:
    """Tests that failures report False and leave the board untouched."""

    @pytest.mark.parametrize("token", ["Qh5", "Ke2", "e5", "Nd4", "xyz", "", "Pe4", "Nbbd2"])
    def test_unplayable_tokens(self, position, token):
        assert not apply_san(position, token)
        assert position == Position.initial()

    @pytest.mark.parametrize(
        "placement",
        [
            "4k3/8/8/3NP3/8/8/8/4K3 w",
            "4k3/8/8/4P3/8/8/8/4K3 w",
            "4k3/8/8/3nP3/8/8/8/4K3 w",
        ],
    )
    def test_diagonal_step_onto_empty_square_needs_passed_pawn(self, placement):
        """Test that exd6 without an enemy pawn on d5 is rejected."""
        position = decode_placement(placement)
        before = position.copy()

        assert not apply_san(position, "exd6")
        assert position == before

    def test_wrong_side(self, position):
        assert not apply_san(position, "e5", side=Color.WHITE)

    def test_explicit_side(self, position):
        assert apply_san(position, "e5", side=Color.BLACK)

        assert position.get("e5") == Piece(Color.BLACK, PieceType.PAWN)
        assert position.side_to_move is Color.WHITE

    @pytest.mark.parametrize("token", ["e4!", "e4?!", "Nf3+", "Nf3!!"])
    def test_decorations_ignored(self, position, token):
        assert apply_san(position, token)
