"""Move generator tests.

Perft counts are the gold standard for move-generator correctness.
Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import STARTING_FEN, position_from_fen
from chessrules.core.perft import divide, perft
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import parse_square

from tests.conftest import B1, C1, CASTLING_FEN, E1, E8, G1, G8, KIWIPETE


def _destinations(fen: str, square: str) -> set[str]:
    gen = MoveGenerator(position_from_fen(fen))
    return {str(m)[2:4] for m in gen.generate_legal_moves_from(parse_square(square))}


# ── Perft ────────────────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 1) == 20

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 2) == 400

    def test_depth_3(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 4) == 197_281

    def test_divide_sums_to_perft(self) -> None:
        counts = divide(position_from_fen(STARTING_FEN), 2)
        assert len(counts) == 20
        assert counts["g1f3"] == 20
        assert sum(counts.values()) == 400

    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(ValueError):
            perft(position_from_fen(STARTING_FEN), -1)


class TestPerftKiwipete:
    """Rich in tactics: castling, en passant, promotions."""

    def test_depth_1(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 1) == 48

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 3) == 97_862


POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"
POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"
POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"


@pytest.mark.parametrize(
    ("fen", "depth", "expected"),
    [
        (POS3, 1, 14),
        (POS3, 2, 191),
        (POS3, 3, 2_812),
        (POS4, 1, 6),
        (POS4, 2, 264),
        (POS4, 3, 9_467),
        (POS5, 1, 44),
        (POS5, 2, 1_486),
        pytest.param(POS5, 3, 62_379, marks=pytest.mark.slow),
    ],
)
def test_perft_reference_positions(fen: str, depth: int, expected: int) -> None:
    assert perft(position_from_fen(fen), depth) == expected


# ── Per-piece generation ─────────────────────────────────────────────────────


class TestSingleSquare:
    def test_knight_from_start(self) -> None:
        assert _destinations(STARTING_FEN, "b1") == {"a3", "c3"}

    def test_empty_square_yields_nothing(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.generate_pseudo_legal_moves_from(parse_square("e4")) == []

    def test_opponent_piece_yields_nothing(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.generate_pseudo_legal_moves_from(parse_square("e7")) == []

    def test_pawn_single_and_double_step(self) -> None:
        assert _destinations(STARTING_FEN, "e2") == {"e3", "e4"}

    def test_pawn_double_step_blocked_by_piece_on_first_square(self) -> None:
        fen = "4k3/8/8/8/8/4n3/4P3/4K3 w - - 0 1"
        assert _destinations(fen, "e2") == set()

    def test_pawn_double_step_blocked_on_second_square(self) -> None:
        fen = "4k3/8/8/8/4n3/8/4P3/4K3 w - - 0 1"
        assert _destinations(fen, "e2") == {"e3"}

    def test_pawn_diagonal_only_onto_enemy(self) -> None:
        fen = "4k3/8/8/3p1P2/4P3/8/8/4K3 w - - 0 1"
        assert _destinations(fen, "e4") == {"d5", "e5"}

    def test_bishop_ray_stops_at_pieces(self) -> None:
        fen = "4k3/8/8/8/8/2p5/1B6/K7 w - - 0 1"
        assert _destinations(fen, "b2") == {"a3", "c3", "c1"}

    def test_rook_rays(self) -> None:
        fen = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
        assert _destinations(fen, "a1") == {
            "b1", "c1", "d1", "a2", "a3", "a4", "a5", "a6", "a7", "a8",
        }


class TestPromotionGeneration:
    def test_four_promotions_per_target(self) -> None:
        pos = position_from_fen("1n2k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        moves = MoveGenerator(pos).generate_legal_moves_from(parse_square("a7"))
        assert all(m.flag == MoveFlag.PROMOTION for m in moves)
        assert {(str(m)[2:4], m.promotion) for m in moves} == {
            (sq, pt)
            for sq in ("a8", "b8")
            for pt in (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)
        }

    def test_black_promotes_on_first_rank(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/p7/4K3 b - - 0 1")
        moves = MoveGenerator(pos).generate_legal_moves_from(parse_square("a2"))
        assert len(moves) == 4
        assert {m.to_sq for m in moves} == {parse_square("a1")}


class TestEnPassantGeneration:
    def test_capture_available_with_target(self) -> None:
        fen = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1"
        moves = MoveGenerator(position_from_fen(fen)).generate_legal_moves_from(
            parse_square("e5")
        )
        assert Move(parse_square("e5"), parse_square("d6"), MoveFlag.EN_PASSANT) in moves

    def test_no_capture_without_target(self) -> None:
        fen = "4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1"
        assert _destinations(fen, "e5") == {"e6"}

    def test_en_passant_exposing_king_is_illegal(self) -> None:
        # Both pawns leave the fifth rank, opening it for the black rook.
        fen = "8/8/8/K2pP2r/8/8/8/7k w - d6 0 1"
        assert _destinations(fen, "e5") == {"e6"}

    @pytest.mark.parametrize("victim", ["N", "b", None])
    def test_target_without_enemy_pawn_behind_is_ignored(self, victim: str | None) -> None:
        board = Board()
        for name, char in (("e8", "k"), ("e1", "K"), ("d5", "P")):
            board[parse_square(name)] = Piece.from_char(char)
        if victim is not None:
            board[parse_square("e5")] = Piece.from_char(victim)
        pos = Position(board, Color.WHITE, CastlingRights.NONE, parse_square("e6"))
        moves = MoveGenerator(pos).generate_legal_moves_from(parse_square("d5"))
        assert [m for m in moves if m.flag == MoveFlag.EN_PASSANT] == []
        assert {str(m)[2:4] for m in moves} == {"d6"}


class TestCastlingGeneration:
    def test_both_sides_available(self) -> None:
        moves = MoveGenerator(position_from_fen(CASTLING_FEN)).generate_legal_moves()
        assert Move(E1, G1, MoveFlag.CASTLE_KINGSIDE) in moves
        assert Move(E1, C1, MoveFlag.CASTLE_QUEENSIDE) in moves

    def test_blocked_path(self) -> None:
        fen = "r3k2r/8/8/8/8/8/8/RN2K1NR w KQkq - 0 1"
        assert _destinations(fen, "e1") == {"d1", "d2", "e2", "f2", "f1"}

    def test_queenside_b_file_only_needs_to_be_empty(self) -> None:
        # b1 attacked does not matter, only c1 and d1 must be safe.
        fen = "1r2k3/8/8/8/8/8/8/R3K3 w Q - 0 1"
        assert "c1" in _destinations(fen, "e1")

    def test_not_out_of_check(self) -> None:
        fen = "4r1k1/8/8/8/8/8/8/R3K2R w KQ - 0 1"
        assert not {"c1", "g1"} & _destinations(fen, "e1")

    def test_not_through_attacked_square(self) -> None:
        fen = "5rk1/8/8/8/8/8/8/R3K2R w KQ - 0 1"
        dests = _destinations(fen, "e1")
        assert "g1" not in dests
        assert "c1" in dests

    def test_not_into_attacked_square(self) -> None:
        fen = "2r3k1/8/8/8/8/8/8/R3K2R w KQ - 0 1"
        dests = _destinations(fen, "e1")
        assert "c1" not in dests
        assert "g1" in dests

    def test_requires_right(self) -> None:
        fen = "r3k2r/8/8/8/8/8/8/R3K2R w Qkq - 0 1"
        assert "g1" not in _destinations(fen, "e1")

    def test_requires_rook_on_corner(self) -> None:
        fen = "r3k3/8/8/8/8/8/8/4K2R b q - 0 1"
        gen = MoveGenerator(position_from_fen(fen))
        castles = [m for m in gen.generate_legal_moves() if m.is_castling]
        assert [m.to_sq for m in castles] == [parse_square("c8")]

    def test_black_kingside(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
        moves = MoveGenerator(pos).generate_legal_moves()
        assert Move(E8, G8, MoveFlag.CASTLE_KINGSIDE) in moves


class TestLegalityFilter:
    def test_pinned_piece_cannot_leave_line(self) -> None:
        fen = "4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1"
        gen = MoveGenerator(position_from_fen(fen))
        assert gen.generate_legal_moves_from(parse_square("e2")) == []
        assert gen.generate_pseudo_legal_moves_from(parse_square("e2")) != []

    def test_king_cannot_step_into_attack(self) -> None:
        fen = "4k3/8/8/8/8/8/r7/4K3 w - - 0 1"
        assert _destinations(fen, "e1") == {"d1", "f1"}

    def test_no_legal_move_leaves_king_in_check(self) -> None:
        pos = position_from_fen(KIWIPETE)
        for move in MoveGenerator(pos).generate_legal_moves():
            child = pos.copy()
            child.make_move(move)
            assert not MoveGenerator(child).is_in_check(Color.WHITE), str(move)

    def test_has_legal_move_matches_list(self) -> None:
        mated = position_from_fen(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        assert not MoveGenerator(mated).has_legal_move()
        assert MoveGenerator(position_from_fen(STARTING_FEN)).has_legal_move()

    def test_generation_does_not_mutate_position(self) -> None:
        pos = position_from_fen(KIWIPETE)
        before = pos.copy()
        MoveGenerator(pos).generate_legal_moves()
        assert pos == before

    def test_b1_knight_unaffected_by_filter(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert len(gen.generate_legal_moves_from(B1)) == 2
