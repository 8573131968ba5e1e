"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.engine.game import Game
from src.engine.position import Position
from src.engine.state import MoveResult


@pytest.fixture
def game() -> Game:
    """Fresh game in the standard starting position"""
    return Game.new()


@pytest.fixture
def play() -> Callable[..., list[MoveResult]]:
    """
    Call the inner function with a game and moves in UCI-like notation ("e2e4", "g1f3", ...).
    Returns the result of every move attempt, so a test can assert they all got accepted.
    """

    def _play(game: Game, *moves: str) -> list[MoveResult]:
        return [
            game.make_move(
                Position.from_algebraic(move[:2]), Position.from_algebraic(move[2:4])
            )
            for move in moves
        ]

    return _play
