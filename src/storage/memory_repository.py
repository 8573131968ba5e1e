"""Implementation of (Game)Repository that keeps games in memory only. Nothing is written to disk."""

import logging
from uuid import UUID, uuid4

from src.engine.game import Game

logger = logging.getLogger(__name__)


class InMemoryGameRepository:
    """
    Games stored in a dictionary by ID.

    NOTE: The repository owns the Game objects it hands out, callers mutate them in place.
    Not thread-safe: serialize access when sharing one repository across threads.
    """

    def __init__(self) -> None:
        self._games: dict[UUID, Game] = {}

    def get_game(self, game_id: UUID) -> Game | None:
        return self._games.get(game_id)

    def create_game(self, game: Game) -> UUID:
        new_id = uuid4()
        self._games[new_id] = game
        logger.debug("Stored game %s", new_id)
        return new_id

    def delete_game(self, game_id: UUID) -> Game | None:
        game = self._games.pop(game_id, None)
        if game is not None:
            logger.debug("Deleted game %s", game_id)
        return game

    def list_games(self) -> list[UUID]:
        return list(self._games)
