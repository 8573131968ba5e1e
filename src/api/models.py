"""Requests and Response models: the narrow contract through which UI / network layers talk to the engine"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, MoveOutcome, PieceType, Status


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    file_character, rank_character = value
    return file_character in "abcdefgh" and rank_character in "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        """Only a structural sanity check. The engine parses (and fully validates) the FEN itself."""
        if value is None:
            return value

        parts = value.strip().split()
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class PossibleMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class PromoteRequest(BaseModel):
    game_id: UUID
    piece_type: PieceType


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen: str
    turn: Color
    status: Status
    status_color: Optional[Color] = None
    promotion_square: Optional[str] = None
    moves_since_capture: int
    move_history: list[str]


class MoveResponse(BaseModel):
    result: MoveOutcome
    game: GameResponse


class PossibleMovesResponse(BaseModel):
    game_id: UUID
    square: str
    targets: list[str]
