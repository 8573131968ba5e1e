"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Self

from src.engine.pieces import Color
from src.engine.position import Position


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK


# Order in which the rights are written in a FEN string
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we expect the king / rook to still be at their starting squares.
    (But boards edited by hand may break this, so the Game still checks the pieces are there.)
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        return cls(
            Position.from_algebraic(k_from),
            Position.from_algebraic(k_to),
            Position.from_algebraic(r_from),
            Position.from_algebraic(r_to),
        )


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def squares_between_on_rank(from_square: Position, to_square: Position) -> list[Position]:
    """
    Find the squares strictly in between the two squares specified that are on the same rank

    Needed for checking if you can still castle (the Game will check which of those are empty etc.)
    """
    if from_square.y != to_square.y:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.x > from_square.x else -1
    return [
        Position(x, from_square.y)
        for x in range(from_square.x + step, to_square.x, step)
    ]


def squares_between(direction: CastlingDirection) -> list[Position]:
    """All of these must be empty to castle (e.g. b1, c1 and d1 for white castling queen side)"""
    rule = CASTLING_RULES[direction]
    return squares_between_on_rank(rule.king_from, rule.rook_from)


def king_path(direction: CastlingDirection) -> list[Position]:
    """
    Squares the king stands on, passes through, and lands on.
    None of these may be under attack (e.g. e1, f1 and g1 for white castling king side).

    NOTE: b1 must be empty for castling queen side, but may be attacked: the king never crosses it.
    """
    rule = CASTLING_RULES[direction]
    return [rule.king_from, *squares_between_on_rank(rule.king_from, rule.king_to), rule.king_to]


def _no_rights() -> dict[CastlingDirection, bool]:
    return {direction: False for direction in CastlingDirection}


@dataclass
class CastlingRights:
    """
    The four independent castling flags.
    During play a flag can only ever be revoked (moving the king/rook, or losing the rook), never be granted again.
    """

    rights: dict[CastlingDirection, bool] = field(default_factory=_no_rights)

    @classmethod
    def all(cls) -> Self:
        return cls({direction: True for direction in CastlingDirection})

    @classmethod
    def from_fen(cls, castle_fen: str) -> Self:
        """parse the part of the FEN string that encodes castling rights ("KQkq", "Kq", "-", ...)"""
        return cls(
            {direction: (direction.value in castle_fen) for direction in CastlingDirection}
        )

    def to_fen(self) -> str:
        """create the part of the FEN string that encodes castling rights"""
        castling_chars = "".join(
            direction.value for direction in CASTLING_ORDER if self.rights[direction]
        )
        return castling_chars or "-"

    def has(self, direction: CastlingDirection) -> bool:
        return self.rights[direction]

    def directions(self, color: Color) -> list[CastlingDirection]:
        """The directions the player with the given color may still castle to"""
        return [
            direction
            for direction in CASTLING_ORDER
            if direction.color == color and self.rights[direction]
        ]

    def revoke(self, direction: CastlingDirection) -> None:
        self.rights[direction] = False

    def revoke_all(self, color: Color) -> None:
        for direction in CastlingDirection:
            if direction.color == color:
                self.revoke(direction)

    def key(self) -> tuple[bool, ...]:
        """Hashable version (used to recognize repeated positions)"""
        return tuple(self.rights[direction] for direction in CASTLING_ORDER)
