"""
Custom exceptions used across layers.

NOTE: GameError does not derive from ValueError. Pydantic wraps ValueErrors raised in validators into a ValidationError,
while any other exception passes through untouched (so callers can catch the domain specific error).
"""


class GameError(Exception):
    """Base class of everything the engine (or the layers on top of it) raises on purpose."""


class InvalidPositionError(GameError):
    """Coordinates or algebraic notation that do not denote a square on the board."""


class InvalidFENError(GameError):
    """The string cannot be interpreted as FEN."""


class IllegalMoveError(GameError):
    """The move is not among the legal moves of the piece."""


class NotYourTurnError(GameError):
    """The piece selected belongs to the player that is not to move."""


class GameStateError(GameError):
    """The operation is not allowed in the current state of the game (game over, awaiting promotion, etc.)"""


class InvalidRequestError(GameError):
    """Request data that cannot be interpreted by the service."""


class RepositoryError(GameError):
    """Problems finding/storing a game."""
