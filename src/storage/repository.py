"""Protocol repository (the service does not care where its games live)"""

from typing import Protocol
from uuid import UUID

from src.engine.game import Game


class GameRepository(Protocol):
    """Keeps hold of the games in play"""

    def get_game(self, game_id: UUID) -> Game | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: Game) -> UUID:
        """Store new game and return the newly created game ID."""
        ...

    def delete_game(self, game_id: UUID) -> Game | None:
        """Remove a game's record."""
        ...

    def list_games(self) -> list[UUID]:
        """IDs of all stored games."""
        ...
