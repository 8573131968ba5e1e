"""Unit tests for /src/engine/legality.py"""

import pytest

from src.engine.attacks import is_in_check
from src.engine.board import Board
from src.engine.legality import filter_legal_moves, leaves_king_in_check
from src.engine.moves import Move, candidate_moves
from src.engine.pieces import Color
from src.engine.position import Position

sq = Position.from_algebraic


def test_pinned_piece_cannot_leave_the_line() -> None:
    board = Board.from_fen("4k3/4r3/8/8/8/8/4B3/4K3")
    assert leaves_king_in_check(board, Move(sq("e2"), sq("d3")), Color.WHITE)
    assert not leaves_king_in_check(board, Move(sq("e1"), sq("d1")), Color.WHITE)


def test_simulation_leaves_board_untouched() -> None:
    placement = "4k3/4r3/8/8/8/8/4B3/4K3"
    board = Board.from_fen(placement)
    leaves_king_in_check(board, Move(sq("e2"), sq("d3")), Color.WHITE)
    assert board.to_fen() == placement


def test_pinned_rook_moves_along_the_pin() -> None:
    board = Board.from_fen("4k3/4r3/8/8/8/8/4R3/4K3")
    legal = filter_legal_moves(board, candidate_moves(sq("e2"), board), Color.WHITE)
    assert {move.to_position.to_algebraic() for move in legal} == {
        "e3", "e4", "e5", "e6", "e7",
    }


def test_king_cannot_step_into_attack() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/3r4/4K3")
    legal = filter_legal_moves(board, candidate_moves(sq("e1"), board), Color.WHITE)
    assert {move.to_position.to_algebraic() for move in legal} == {"d2", "f1"}


def test_must_resolve_check() -> None:
    """In check, only the moves that resolve the check are left"""
    board = Board.from_fen("4k3/8/8/8/8/8/1N6/r3K3")
    # the knight cannot reach a1, it can only block on d1
    legal = filter_legal_moves(board, candidate_moves(sq("b2"), board), Color.WHITE)
    assert {move.to_position.to_algebraic() for move in legal} == {"d1"}


@pytest.mark.parametrize(
    "placement, color",
    [
        ("8/4K3/8/2p5/8/8/1R6/R3k3", Color.BLACK),  # back rank mate by two rooks
        ("7k/5N1p/8/8/8/8/8/2K3R1", Color.BLACK),  # knight check, rook covers the g-file
        ("6k1/8/8/8/8/5pP1/5PqP/6K1", Color.WHITE),  # protected queen next to the king
        ("r1bqkb1r/pppp1Qpp/2n2n2/4p3/2B1P3/8/PPPP1PPP/RNB1K1NR", Color.BLACK),  # scholar's mate
        ("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR", Color.WHITE),  # fool's mate
    ],
)
def test_checkmated_side_has_no_legal_move(placement: str, color: Color) -> None:
    """Every piece of the mated side is tried, not only the king"""
    board = Board.from_fen(placement)
    assert is_in_check(board, color)
    pieces = list(board.pieces(color))
    assert len(pieces) > 1
    for position, _ in pieces:
        assert filter_legal_moves(board, candidate_moves(position, board), color) == []
