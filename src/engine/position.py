"""
A single square's coordinates on the board

(placed in its own module as every other engine module needs to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Optional

from src.core.exceptions import InvalidPositionError

# Chess board is always 8x8 (files, ranks)
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]
RANK_NAMES = "".join(str(rank) for rank in range(1, BOARD_DIMENSIONS[1] + 1))


def is_within_bounds(x: int, y: int) -> bool:
    return (0 <= x < BOARD_DIMENSIONS[0]) and (0 <= y < BOARD_DIMENSIONS[1])


@dataclass(frozen=True)
class Position:
    """
    Zero-based coordinates
    ----

    * x: the file. x=0 is the a-file (queen side), x=7 the h-file.
    * y: the rank. y=0 is white's first rank, y=7 black's first rank.

    ex) e4 is Position(4, 3)
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        # out-of-range coordinates get rejected here, nowhere else
        if not is_within_bounds(self.x, self.y):
            raise InvalidPositionError(
                f"Coordinates ({self.x}, {self.y}) are not on the board."
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0] not in FILE_NAMES or sq[1] not in RANK_NAMES:
            raise InvalidPositionError(
                f"Cannot interpret {sq!r} as a square in algebraic notation."
            )
        return cls(FILE_NAMES.index(sq[0]), RANK_NAMES.index(sq[1]))

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.x]}{self.y + 1}"

    def offset(self, dx: int, dy: int) -> Optional[Position]:
        """The square (dx, dy) away from this one, or None when that walks off the board."""
        x, y = self.x + dx, self.y + dy
        if not is_within_bounds(x, y):
            return None
        return Position(x, y)

    def __str__(self) -> str:
        return self.to_algebraic()


# Every square, a1 first and h8 last (rank by rank). Same order as the squares stored by the Board.
ALL_POSITIONS: tuple[Position, ...] = tuple(
    Position(x, y)
    for y in range(BOARD_DIMENSIONS[1])
    for x in range(BOARD_DIMENSIONS[0])
)
