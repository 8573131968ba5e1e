"""
The outcome types reported back to the caller after every move.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Self

from src.engine.pieces import Color
from src.engine.position import Position


class GameStatus(Enum):
    NORMAL = auto()
    CHECK = auto()
    CHECKMATE = auto()
    DRAW = auto()
    AWAITING_PROMOTION = auto()


class DrawReason(Enum):
    STALEMATE = auto()
    FIFTY_MOVE_RULE = auto()
    THREEFOLD_REPETITION = auto()


class MoveResult(Enum):
    ALLOWED = auto()
    DISALLOWED = auto()


@dataclass(frozen=True)
class GameState:
    """
    Status + the data that comes with it
    ----

    * CHECK / CHECKMATE: color is the side whose king is attacked (the side to move)
    * AWAITING_PROMOTION: position is the square of the pawn waiting to be promoted
    * DRAW: draw_reason tells why. It is for information only and does not take part in comparisons.

    Use the named constructors, e.g. GameState.check(Color.BLACK)
    """

    status: GameStatus
    color: Optional[Color] = None
    position: Optional[Position] = None
    draw_reason: Optional[DrawReason] = field(default=None, compare=False)

    @classmethod
    def normal(cls) -> Self:
        return cls(GameStatus.NORMAL)

    @classmethod
    def check(cls, color: Color) -> Self:
        return cls(GameStatus.CHECK, color=color)

    @classmethod
    def checkmate(cls, color: Color) -> Self:
        return cls(GameStatus.CHECKMATE, color=color)

    @classmethod
    def draw(cls, reason: Optional[DrawReason] = None) -> Self:
        return cls(GameStatus.DRAW, draw_reason=reason)

    @classmethod
    def awaiting_promotion(cls, position: Position) -> Self:
        return cls(GameStatus.AWAITING_PROMOTION, position=position)

    @property
    def is_over(self) -> bool:
        return self.status in (GameStatus.CHECKMATE, GameStatus.DRAW)

    @property
    def accepts_moves(self) -> bool:
        """No moves from either side while the game is over or a promotion is pending"""
        return not self.is_over and self.status != GameStatus.AWAITING_PROMOTION
