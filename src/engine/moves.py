"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the candidate (pseudo-legal) move sets for each piece type.

Whether a candidate move leaves your own king in check is decided later by the legality filter.
Castling moves are added by the Game, as those need the castling rights and the attack oracle.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.engine.castling import CASTLING_RULES, CastlingDirection
from src.engine.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType, Square
from src.engine.position import Position


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def get(self, position: Position) -> Square: ...


Vector = tuple[int, int]

# White moves UP the board, black moves DOWN
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KING_DELTAS: list[Vector] = DIAGONALS + STRAIGHTS


@dataclass(frozen=True)
class Move:
    """
    A move to be made, including the side effects it carries.
    ----

    * castling_direction: set for a castling king move. The rook travels along.
    * en_passant_capture: set for an en passant capture. The position of the pawn that gets taken (NOT the destination).
    * promote_to: only filled in once the promotion has been chosen (used for the move history)
    """

    from_position: Position
    to_position: Position
    castling_direction: Optional[CastlingDirection] = None
    en_passant_capture: Optional[Position] = None
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface (long algebraic notation)
        ---

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king side

        NOTE: Castling / En Passant only get recognized by matching against the Game's legal moves
        """
        move = cls(Position.from_algebraic(uci[:2]), Position.from_algebraic(uci[2:4]))
        if len(uci) == 5:
            return cls(move.from_position, move.to_position, promote_to=FEN_TO_PIECE[uci[4]])
        return move

    def to_uci(self) -> str:
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_position.to_algebraic()}{self.to_position.to_algebraic()}{piece_char}"

    def changes(self, board: Board) -> dict[Position, Square]:
        """Every square this move rewrites, with its new content."""
        changes: dict[Position, Square] = {self.from_position: None}
        if self.en_passant_capture is not None:
            changes[self.en_passant_capture] = None
        if self.castling_direction is not None:
            rule = CASTLING_RULES[self.castling_direction]
            changes[rule.rook_from] = None
            changes[rule.rook_to] = board.get(rule.rook_from)
        changes[self.to_position] = board.get(self.from_position)
        return changes


def _own_color(position: Position, board: Board) -> Color:
    piece = board.get(position)
    # for the type checker: rules only get dispatched for occupied squares
    assert piece is not None
    return piece.color


# --- MOVEMENT RULES ---
def raycasting_move(
    position: Position, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board. An enemy piece blocking the ray can be captured, a friendly one cannot.
    """
    player_color = _own_color(position, board)
    moves: list[Move] = []
    for dx, dy in directions:
        target = position.offset(dx, dy)
        while target is not None:
            occupant = board.get(target)
            if occupant is not None:
                if occupant.color != player_color:
                    moves.append(Move(position, target))
                break
            moves.append(Move(position, target))
            target = target.offset(dx, dy)
    return moves


def single_step_move(position: Position, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump by a single step"""
    player_color = _own_color(position, board)
    moves: list[Move] = []
    for dx, dy in deltas:
        target = position.offset(dx, dy)
        if target is None:
            continue

        occupant = board.get(target)
        if occupant is None or occupant.color != player_color:
            moves.append(Move(position, target))
    return moves


def candidate_pawn_moves(
    position: Position, board: Board, en_passant_pawn: Optional[Position] = None
) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally
    - takes en passant: the enemy pawn that just made a double step, standing right next to it, is taken by moving diagonally behind it.
    """
    color = _own_color(position, board)
    forward = PAWN_DIRECTION[color]
    moves: list[Move] = []

    one_step = position.offset(0, forward)
    if one_step is not None and board.get(one_step) is None:
        moves.append(Move(position, one_step))
        two_steps = one_step.offset(0, forward)
        if (
            position.y == PAWN_START_RANK[color]
            and two_steps is not None
            and board.get(two_steps) is None
        ):
            moves.append(Move(position, two_steps))

    enemy_pawn = Piece(PieceType.PAWN, color.flip())
    for dx in (-1, 1):
        target = position.offset(dx, forward)
        if target is None:
            continue

        occupant = board.get(target)
        if occupant is not None:
            if occupant.color != color:
                moves.append(Move(position, target))
            continue

        beside = position.offset(dx, 0)
        if (
            en_passant_pawn is not None
            and beside == en_passant_pawn
            and board.get(beside) == enemy_pawn
        ):
            moves.append(Move(position, target, en_passant_capture=beside))
    return moves


def candidate_knight_moves(
    position: Position, board: Board, en_passant_pawn: Optional[Position] = None
) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(position, board, KNIGHT_DELTAS)


def candidate_bishop_moves(
    position: Position, board: Board, en_passant_pawn: Optional[Position] = None
) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(position, board, DIAGONALS)


def candidate_rook_moves(
    position: Position, board: Board, en_passant_pawn: Optional[Position] = None
) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(position, board, STRAIGHTS)


def candidate_queen_moves(
    position: Position, board: Board, en_passant_pawn: Optional[Position] = None
) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(position, board, DIAGONALS + STRAIGHTS)


def candidate_king_moves(
    position: Position, board: Board, en_passant_pawn: Optional[Position] = None
) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled by the Game).
    """
    return single_step_move(position, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board, Optional[Position]], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}
assert set(MOVEMENT_RULES) == set(PieceType), "every piece type needs a movement rule"


def candidate_moves(
    position: Position, board: Board, en_passant_pawn: Optional[Position] = None
) -> list[Move]:
    """Pseudo-legal moves of whatever piece stands on the square (none for an empty square)"""
    piece = board.get(position)
    if piece is None:
        return []
    movement_rule = MOVEMENT_RULES[piece.piece_type]
    return movement_rule(position, board, en_passant_pawn)


def candidate_castling_move(direction: CastlingDirection) -> Move:
    rule = CASTLING_RULES[direction]
    return Move(rule.king_from, rule.king_to, castling_direction=direction)


def is_pawn_move_to_promotion_rank(move: Move, board: Board) -> bool:
    """check if the move is a pawn move that reaches the far end of the board"""
    moving_piece = board.get(move.from_position)
    return (
        moving_piece is not None
        and moving_piece.piece_type == PieceType.PAWN
        and move.to_position.y == PROMOTION_RANK[moving_piece.color]
    )
