"""A candidate move is legal if, after making it, your own king is not attacked."""

from src.engine.attacks import is_in_check
from src.engine.board import Board
from src.engine.moves import Move
from src.engine.pieces import Color


def leaves_king_in_check(board: Board, move: Move, color: Color) -> bool:
    """
    Return True if the move puts (or leaves) you in check

    plan:
    1. make the candidate move on the board (only the squares it touches are backed up)
    2. determine if king is in check on the new board
    3. restore the squares, whatever the outcome
    """
    with board.trial(move.changes(board)):
        return is_in_check(board, color)


def filter_legal_moves(board: Board, moves: list[Move], color: Color) -> list[Move]:
    """keep those moves that do not put (or leave) you in check"""
    return [move for move in moves if not leaves_king_in_check(board, move, color)]
