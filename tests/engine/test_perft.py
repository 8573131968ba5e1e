"""
Move generation counted against published node totals ("perft").

Every legal move is played on a copy of the game, recursively up to a fixed depth.
A pawn reaching the final rank branches into one node per promotion option.
"""

from copy import deepcopy

import pytest

from src.core.settings import EngineSettings
from src.engine.attacks import is_in_check
from src.engine.fen import STARTING_FEN
from src.engine.game import Game
from src.engine.moves import Move, is_pawn_move_to_promotion_rank
from src.engine.pieces import PROMOTION_OPTIONS, PieceType
from src.engine.position import Position
from src.engine.state import GameStatus, MoveResult

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
ROOK_ENDGAME = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"
PROMOTIONS_AND_CASTLING = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"
PROMOTION_BY_CAPTURE = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"

# repetition needs the history of the game, node totals count positions without it
NO_REPETITION = EngineSettings(detect_repetition=False)


def children(game: Game, move: Move) -> list[Game]:
    """Games after the move, one per promotion option if the move reaches the final rank"""
    child = deepcopy(game)
    assert child.make_move(move.from_position, move.to_position) == MoveResult.ALLOWED
    if child.game_state.status != GameStatus.AWAITING_PROMOTION:
        return [child]

    promoted = []
    for piece_type in PROMOTION_OPTIONS:
        option = deepcopy(child)
        assert option.promote(piece_type) == MoveResult.ALLOWED
        promoted.append(option)
    return promoted


def perft(game: Game, depth: int) -> int:
    moves = game.legal_moves()
    if depth == 1:
        return sum(
            len(PROMOTION_OPTIONS) if is_pawn_move_to_promotion_rank(move, game.board) else 1
            for move in moves
        )
    return sum(perft(child, depth - 1) for move in moves for child in children(game, move))


@pytest.mark.parametrize(
    "fen, depth, nodes",
    [
        (STARTING_FEN, 1, 20),
        (STARTING_FEN, 2, 400),
        (STARTING_FEN, 3, 8902),
        (KIWIPETE, 1, 48),
        (KIWIPETE, 2, 2039),
        (ROOK_ENDGAME, 1, 14),
        (ROOK_ENDGAME, 2, 191),
        (ROOK_ENDGAME, 3, 2812),
        (PROMOTIONS_AND_CASTLING, 1, 6),
        (PROMOTIONS_AND_CASTLING, 2, 264),
        (PROMOTION_BY_CAPTURE, 1, 44),
        (PROMOTION_BY_CAPTURE, 2, 1486),
    ],
)
def test_perft(fen: str, depth: int, nodes: int) -> None:
    game = Game.from_fen(fen, NO_REPETITION)
    assert perft(game, depth) == nodes


@pytest.mark.parametrize(
    "fen", [STARTING_FEN, KIWIPETE, ROOK_ENDGAME, PROMOTIONS_AND_CASTLING, PROMOTION_BY_CAPTURE]
)
def test_no_legal_move_leaves_own_king_in_check(fen: str) -> None:
    game = Game.from_fen(fen, NO_REPETITION)
    mover = game.turn
    for move in game.legal_moves():
        for child in children(game, move):
            assert not is_in_check(child.board, mover), move.to_uci()


def test_no_accepted_move_leaves_own_king_in_check() -> None:
    """A game with captures, en passant, a promotion and castling on both sides"""
    game = Game.new()
    moves = [
        "e2e4", "d7d5", "e4d5", "c7c5", "d5c6", "g8f6", "c6b7", "b8c6",
        "b7a8q", "e7e6", "g1f3", "f8e7", "f1e2", "e8g8", "e1g1",
    ]
    for uci in moves:
        mover = game.turn
        result = game.make_move(Position.from_algebraic(uci[:2]), Position.from_algebraic(uci[2:4]))
        assert result == MoveResult.ALLOWED, uci
        if len(uci) == 5:
            assert game.promote(PieceType.QUEEN) == MoveResult.ALLOWED
        assert not is_in_check(game.board, mover), uci

    assert game.to_fen() == "Q1bq1rk1/p3bppp/2n1pn2/8/8/5N2/PPPPBPPP/RNBQ1RK1 b - - 5 8"
