"""
Forsyth-Edwards Notation: the part of the game that can be encoded in a single line of text.

Parsing is all-or-nothing: the whole string is validated before any of it is used,
so a malformed FEN raises InvalidFENError and never leaves a game half-loaded.
NOTE: Only the *structure* is validated. A position without kings, or with pawns on the back rank, is accepted as is.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import InvalidFENError, InvalidPositionError
from src.engine.castling import CastlingRights
from src.engine.moves import PAWN_DIRECTION
from src.engine.pieces import FEN_TO_PIECE, Color
from src.engine.position import BOARD_DIMENSIONS, Position

logger = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
CASTLING_LETTERS = "KQkq"
# a run of empty squares is written as a single digit
EMPTY_RUN_DIGITS = "12345678"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """

    # there should be 6 parts to the string
    parts = fen.split()
    if len(parts) != 6:
        return False

    placement, color, castling, en_passant, half_move_counter, full_move_counter = parts
    return (
        is_valid_placement(placement)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(full_move_counter)
    )


def is_valid_placement(placement: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = placement.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in EMPTY_RUN_DIGITS:
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding is a subsequence of KQkq (KQkq, KQk, Qq, etc.) or a '-' if all rights have been revoked."""
    if castling == "-":
        return True
    remaining = iter(CASTLING_LETTERS)
    # membership test on an iterator consumes it: enforces the canonical order and no duplicates
    return bool(castling) and all(letter in remaining for letter in castling)


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square that exists on the board or a '-'"""
    if en_passant == "-":
        return True
    try:
        Position.from_algebraic(en_passant)
    except InvalidPositionError:
        return False
    return True


def is_valid_move_counter(counter: str) -> bool:
    # ASCII digits only (str.isdigit also accepts e.g. superscripts)
    return counter.isascii() and counter.isdecimal()


# --- EN PASSANT: FEN TARGET SQUARE <-> PAWN THAT CAN BE TAKEN ---
def en_passant_pawn_from_target(
    target: Optional[Position], color_to_move: Color
) -> Optional[Position]:
    """
    FEN records the square *behind* the pawn that just made a double step (the square the capturing pawn lands on).
    The engine records the pawn itself: one step further in the direction the pawn was moving.
    """
    if target is None:
        return None
    pawn_owner = color_to_move.flip()
    return target.offset(0, PAWN_DIRECTION[pawn_owner])


def en_passant_target_from_pawn(
    pawn: Optional[Position], color_to_move: Color
) -> Optional[Position]:
    """Reverse of en_passant_pawn_from_target"""
    if pawn is None:
        return None
    pawn_owner = color_to_move.flip()
    return pawn.offset(0, -PAWN_DIRECTION[pawn_owner])


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

    <board position string> <active color> <castling rights> <en passant square> <# half move clock> <number turns played>

    * The string to describe the board position is described in the Board class
    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
        In the starting position: KQkq (all rights available), and if all rights are revoked a "-" is used.
    * The en passant square is the square a pawn could move to when taking en passant. If not available a "-" is used.
    * The half move clock counts the number of half moves made since the last pawn move or capture (fifty-move rule)
    * The number of turns starts at 1 and increments after every move black makes.

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    i.e. it is white to move, all castling options available, no en passant square, no half moves and we are in the first turn.
    """

    placement: str
    color_to_move: Color
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_target: Optional[Position] = None
    half_move_clock: int = 0
    fullmove_number: int = 1

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN (before anything gets parsed):
        if not is_valid_fen(fen):
            logger.debug("Rejected FEN: %r", fen)
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        # extract the different components. FEN is space separated
        (
            placement,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            fullmove_number,
        ) = fen.split()

        color_to_move = Color.WHITE if active_color == "w" else Color.BLACK
        en_passant_target = (
            Position.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )
        return cls(
            placement,
            color_to_move,
            CastlingRights.from_fen(castling_str),
            en_passant_target,
            int(half_move_clock),
            int(fullmove_number),
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_algebraic = (
            self.en_passant_target.to_algebraic()
            if self.en_passant_target is not None
            else "-"
        )
        return (
            f"{self.placement} {active_color} {self.castling_rights.to_fen()} "
            f"{en_passant_algebraic} {self.half_move_clock} {self.fullmove_number}"
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)
