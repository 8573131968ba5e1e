"""
Type definitions used across layers

NOTE: The engine has its own Color / PieceType enums (src/engine/pieces.py). These string-valued versions are what
crosses the boundary (requests and responses). Same names, as that reads clearly: the imports show which version is used where.
"""

from enum import StrEnum


class Status(StrEnum):
    NORMAL = "normal"
    CHECK = "check"
    CHECKMATE = "checkmate"
    DRAW = "draw"
    AWAITING_PROMOTION = "awaiting promotion"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class MoveOutcome(StrEnum):
    ALLOWED = "allowed"
    DISALLOWED = "disallowed"
