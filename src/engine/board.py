"""The Board only stores pieces. It knows nothing about whose turn it is or which positions are legal."""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional, Self

from src.engine.pieces import Color, Piece, PieceType, Square
from src.engine.position import ALL_POSITIONS, BOARD_DIMENSIONS, Position

NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]


def _index(position: Position) -> int:
    return position.y * BOARD_DIMENSIONS[0] + position.x


@dataclass
class Board:
    squares: list[Square] = field(default_factory=lambda: [None] * NUM_SQUARES)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: Assumes the placement has already been validated (see fen.py)
        """
        board = cls()
        for rank_idx, fen_one_rank in enumerate(fen_str.split("/")):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            y = BOARD_DIMENSIONS[1] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            x = 0
            for character in fen_one_rank:
                if character.isalpha():
                    board.set(Position(x, y), Piece.from_fen(character))
                    x += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    x += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(y) for y in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, y: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for x in range(BOARD_DIMENSIONS[0]):
            piece = self.get(Position(x, y))
            if piece is None:
                empty_count += 1
                continue

            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def get(self, position: Position) -> Square:
        return self.squares[_index(position)]

    def set(self, position: Position, square: Square) -> None:
        self.squares[_index(position)] = square

    def clear(self) -> None:
        self.squares = [None] * NUM_SQUARES

    def pieces(self, color: Color) -> list[tuple[Position, Piece]]:
        return [
            (position, piece)
            for position, piece in zip(ALL_POSITIONS, self.squares)
            if piece is not None and piece.color == color
        ]

    def find_king(self, color: Color) -> Optional[Position]:
        """Boards edited by hand may lack a king. Returns the first one found otherwise."""
        king = Piece(PieceType.KING, color)
        return next(
            (
                position
                for position, piece in zip(ALL_POSITIONS, self.squares)
                if piece == king
            ),
            None,
        )

    def apply(self, changes: Mapping[Position, Square]) -> None:
        for position, square in changes.items():
            self.set(position, square)

    @contextmanager
    def trial(self, changes: Mapping[Position, Square]) -> Iterator[Self]:
        """
        Temporarily apply changes to the board
        ----

        Only the cells that are touched get backed up and restored again on exit, regardless of what happens inside the block.
        """
        backup = {position: self.get(position) for position in changes}
        self.apply(changes)
        try:
            yield self
        finally:
            self.apply(backup)

    def snapshot(self) -> tuple[Square, ...]:
        """Immutable (hashable) copy of the piece placement"""
        return tuple(self.squares)
