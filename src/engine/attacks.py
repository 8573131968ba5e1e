"""
Attacking rules: "is this square in the line of sight of one of the opponent's pieces?"

Where the movement rules answer _"Where can the piece on this square go?"_,
these rules look outward from the target square and answer _"Is there a piece of the given color that could capture on this square?"_

NOTE: Only the basic geometry is used (never the legality filter), otherwise checking for check would recurse into itself.
"""

from typing import Callable

from src.engine.board import Board
from src.engine.moves import (
    DIAGONALS,
    KING_DELTAS,
    KNIGHT_DELTAS,
    PAWN_DIRECTION,
    STRAIGHTS,
    Vector,
)
from src.engine.pieces import Color, Piece, PieceType
from src.engine.position import Position


def raycasting_attack(
    position: Position,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Walk along every direction until the first occupied square (or the edge of the board).
    Returns TRUE if that first piece encountered belongs to `by_color` and is one of the given types.
    """
    attackers = {Piece(piece_type, by_color) for piece_type in by_piece_types}
    for dx, dy in directions:
        target = position.offset(dx, dy)
        while target is not None:
            occupant = board.get(target)
            if occupant is not None:
                if occupant in attackers:
                    return True
                break
            target = target.offset(dx, dy)
    return False


def single_step_attack(
    position: Position,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Equivalent of raycasting for pawns, kings, and knights: they only reach a single step along a direction.
    """
    attacker = Piece(by_piece_type, by_color)
    for dx, dy in deltas:
        target = position.offset(dx, dy)
        if target is not None and board.get(target) == attacker:
            return True
    return False


def is_attacked_by_pawn(position: Position, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. Hence, vectors are exactly opposite to the pawn's own capture directions.

    NOTE: Unlike the movement rule, a pawn attacks its diagonals even when they are empty (matters for castling transit squares).
    """
    backward = -PAWN_DIRECTION[by_color]
    return single_step_attack(
        position, by_color, PieceType.PAWN, board, [(1, backward), (-1, backward)]
    )


def is_attacked_by_knight(position: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(position, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(position: Position, by_color: Color, board: Board) -> bool:
    return raycasting_attack(position, by_color, (PieceType.BISHOP,), board, DIAGONALS)


def is_attacked_by_rook(position: Position, by_color: Color, board: Board) -> bool:
    return raycasting_attack(position, by_color, (PieceType.ROOK,), board, STRAIGHTS)


def is_attacked_by_queen(position: Position, by_color: Color, board: Board) -> bool:
    """The Queen combines the rook's and the bishop's lines of sight"""
    return raycasting_attack(
        position, by_color, (PieceType.QUEEN,), board, DIAGONALS + STRAIGHTS
    )


def is_attacked_by_king(position: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(position, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}
assert set(ATTACK_RULES) == set(PieceType), "every piece type needs an attack rule"


def is_square_attacked(board: Board, position: Position, by_color: Color) -> bool:
    return any(rule(position, by_color, board) for rule in ATTACK_RULES.values())


def is_any_square_attacked(board: Board, positions: list[Position], by_color: Color) -> bool:
    return any(is_square_attacked(board, position, by_color) for position in positions)


def is_in_check(board: Board, color: Color) -> bool:
    """Is the king of the given color attacked? A side without a king (board edited by hand) can never be in check."""
    king = board.find_king(color)
    if king is None:
        return False
    return is_square_attacked(board, king, color.flip())
