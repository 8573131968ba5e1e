"""Orchestration of communication from a UI / network layer to the rules engine (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    MoveResponse,
    PossibleMovesRequest,
    PossibleMovesResponse,
    PromoteRequest,
)
from src.core.exceptions import RepositoryError
from src.core.settings import EngineSettings
from src.core.shared_types import Color, MoveOutcome, Status
from src.engine.game import Game
from src.engine.pieces import PieceType
from src.engine.position import Position
from src.engine.state import MoveResult
from src.storage.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess games."""

    def __init__(
        self, repository: GameRepository, settings: Optional[EngineSettings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or EngineSettings()

    # -- Request handling ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game in the standard starting position, or from the supplied FEN (InvalidFENError if malformed)."""
        if request.starting_fen:
            game = Game.from_fen(request.starting_fen, self.settings)
        else:
            game = Game.new(self.settings)

        game_id = self.repo.create_game(game)
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by a frontend to check when it is the player's turn for instance.
        """
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def possible_moves(self, request: PossibleMovesRequest) -> PossibleMovesResponse:
        """Legal destinations of the piece on the requested square."""
        game = self._fetch_game(request.game_id)
        targets = game.get_possible_moves(Position.from_algebraic(request.square))
        return PossibleMovesResponse(
            game_id=request.game_id,
            square=request.square,
            targets=sorted(target.to_algebraic() for target in targets),
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. A disallowed move is a regular answer, not an error."""
        game = self._fetch_game(request.game_id)
        result = game.make_move(
            Position.from_algebraic(request.from_square),
            Position.from_algebraic(request.to_square),
        )
        return self._create_move_response(request.game_id, game, result)

    def promote(self, request: PromoteRequest) -> MoveResponse:
        game = self._fetch_game(request.game_id)
        result = game.promote(PieceType[request.piece_type.name])
        return self._create_move_response(request.game_id, game, result)

    def list_games(self) -> list[UUID]:
        return self.repo.list_games()

    def delete_game(self, request: DeleteGameRequest) -> None:
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _create_move_response(
        self, game_id: UUID, game: Game, result: MoveResult
    ) -> MoveResponse:
        return MoveResponse(
            result=MoveOutcome[result.name],
            game=self._create_game_response(game_id, game),
        )

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the Game into a GameResponse (for game with given ID.)"""
        state = game.game_state
        return GameResponse(
            game_id=game_id,
            fen=game.to_fen(),
            turn=Color[game.turn.name],
            status=Status[state.status.name],
            status_color=Color[state.color.name] if state.color else None,
            promotion_square=state.position.to_algebraic() if state.position else None,
            moves_since_capture=game.moves_since_capture,
            move_history=[move.to_uci() for move in game.moves],
        )

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game = self.repo.get_game(game_id)
        if game is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game
