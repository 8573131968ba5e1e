"""Tunable rule settings. Every Game owns one (defaults are the classical rules)."""

from pydantic import BaseModel, ConfigDict, Field


class EngineSettings(BaseModel):
    """
    Draw-by-rule thresholds.
    ----

    * fifty_move_limit: number of half-moves without a capture or pawn move after which the game is drawn.
        The classical fifty-move rule counts 50 moves by *each* player, hence 100 half-moves.
    * detect_repetition: switch the (threefold) repetition rule on or off.
    * repetition_limit: how often the same position must occur before it is a draw.
    """

    model_config = ConfigDict(frozen=True)

    fifty_move_limit: int = Field(default=100, ge=1)
    detect_repetition: bool = True
    repetition_limit: int = Field(default=3, ge=2)
