"""
The Game class is the entrypoint into the rules engine.
It owns the board and all bookkeeping (turn, castling rights, en passant, move counters) and
orchestrates all the rules required to play a turn.

Player-facing operations never raise: they answer ALLOWED / DISALLOWED and a rejected request leaves the Game untouched.
"""

import logging
from collections import Counter
from collections.abc import Hashable
from dataclasses import dataclass, field, replace
from typing import Optional, Self

from src.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
)
from src.core.settings import EngineSettings
from src.engine.attacks import is_any_square_attacked, is_in_check, is_square_attacked
from src.engine.board import Board
from src.engine.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    king_path,
    squares_between,
)
from src.engine.fen import (
    STARTING_FEN,
    FENState,
    en_passant_pawn_from_target,
    en_passant_target_from_pawn,
)
from src.engine.legality import filter_legal_moves
from src.engine.moves import (
    Move,
    candidate_castling_move,
    candidate_moves,
    is_pawn_move_to_promotion_rank,
)
from src.engine.pieces import PROMOTION_OPTIONS, Color, Piece, PieceType, Square
from src.engine.position import Position
from src.engine.state import DrawReason, GameState, GameStatus, MoveResult

logger = logging.getLogger(__name__)


@dataclass
class Game:
    board: Board = field(default_factory=Board)
    turn: Color = Color.WHITE
    game_state: GameState = field(default_factory=GameState.normal)
    moves_since_capture: int = 0
    en_passant_susceptible_pawn: Optional[Position] = None
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    fullmove_number: int = 1
    moves: list[Move] = field(default_factory=list)
    settings: EngineSettings = field(default_factory=EngineSettings)
    position_history: Counter[Hashable] = field(default_factory=Counter, repr=False)

    # --- CREATION ---
    @classmethod
    def new(cls, settings: Optional[EngineSettings] = None) -> Self:
        """Standard starting position"""
        return cls.from_fen(STARTING_FEN, settings)

    @classmethod
    def from_fen(cls, fen: str, settings: Optional[EngineSettings] = None) -> Self:
        game = cls(settings=settings or EngineSettings())
        game.load_fen(fen)
        return game

    def load_fen(self, fen: str) -> None:
        """
        Replace board and metadata with the FEN string's content.
        ----

        The string is validated in full first: on malformed input InvalidFENError is raised and nothing has changed.
        The state is evaluated for the side to move, so loading a mated position reads as checkmate right away.
        """
        state = FENState.from_fen(fen)

        self.board = Board.from_fen(state.placement)
        self.turn = state.color_to_move
        self.castling_rights = state.castling_rights
        self.en_passant_susceptible_pawn = en_passant_pawn_from_target(
            state.en_passant_target, state.color_to_move
        )
        self.moves_since_capture = state.half_move_clock
        self.fullmove_number = state.fullmove_number
        self.moves = []
        self.position_history = Counter()
        self._record_position()
        self.game_state = self._evaluate_state()
        logger.info("Loaded FEN %r: %s", fen, self.game_state.status.name)

    def to_fen(self) -> str:
        return FENState(
            placement=self.board.to_fen(),
            color_to_move=self.turn,
            castling_rights=CastlingRights(dict(self.castling_rights.rights)),
            en_passant_target=en_passant_target_from_pawn(
                self.en_passant_susceptible_pawn, self.turn
            ),
            half_move_clock=self.moves_since_capture,
            fullmove_number=self.fullmove_number,
        ).to_fen()

    # --- DIRECT BOARD ACCESS (no rules enforced) ---
    def clear_board(self) -> None:
        """Empties all squares. Turn, state, and other metadata are left as they are."""
        self.board.clear()

    def get_square(self, position: Position) -> Square:
        return self.board.get(position)

    def set_square(self, position: Position, square: Square) -> None:
        """NOTE: Callers are responsible for consistency after editing by hand. The state is re-evaluated after the next move."""
        self.board.set(position, square)

    # --- QUERIES ---
    def get_possible_moves(self, position: Position) -> set[Position]:
        """
        Legal destinations of the piece on the square.

        Empty if the square is empty, the piece is not of the side to move, or the game does not accept moves.
        """
        piece = self.board.get(position)
        if not self.game_state.accepts_moves or piece is None or piece.color != self.turn:
            return set()
        return {move.to_position for move in self._legal_moves_from(position)}

    def legal_moves(self) -> list[Move]:
        """Every legal move of the side to move (empty when the game does not accept moves)"""
        if not self.game_state.accepts_moves:
            return []
        return [
            move
            for position, _ in self.board.pieces(self.turn)
            for move in self._legal_moves_from(position)
        ]

    def is_square_attacked(self, position: Position, by_color: Color) -> bool:
        return is_square_attacked(self.board, position, by_color)

    # --- PLAYING ---
    def make_move(self, from_position: Position, to_position: Position) -> MoveResult:
        """
        Attempt to make a move
        -----

        1. check the game accepts moves, there is a piece, and it is that piece's turn
        2. check the destination is among the legal moves of the piece
        3. update the board (NOTE: if castling, move the king and the rook; if en passant, remove the passed pawn)
        4. update castling rights, the en passant pawn, and the move counters
        5. pawn reached the final rank? --> wait for the promotion. Otherwise hand the turn over and update the game state
        """
        try:
            move = self._validate_move(from_position, to_position)
        except GameError as error:
            logger.debug("Move %s%s disallowed: %s", from_position, to_position, error)
            return MoveResult.DISALLOWED

        self._apply_move(move)
        return MoveResult.ALLOWED

    def promote(self, piece_type: PieceType) -> MoveResult:
        """Replace the pawn waiting on the final rank, then finish the turn of the pawn's side."""
        try:
            position = self._validate_promotion(piece_type)
        except GameError as error:
            logger.debug("Promotion to %s disallowed: %s", piece_type.name, error)
            return MoveResult.DISALLOWED

        pawn = self.board.get(position)
        # for the type checker: validated above
        assert pawn is not None
        self.board.set(position, pawn.promoted_to(piece_type))
        if self.moves:
            self.moves[-1] = replace(self.moves[-1], promote_to=piece_type)
        self._finish_turn(pawn.color)
        return MoveResult.ALLOWED

    # -- PRIVATE HELPERS ---
    def _validate_move(self, from_position: Position, to_position: Position) -> Move:
        if not self.game_state.accepts_moves:
            raise GameStateError(
                f"Game does not accept moves. state: {self.game_state.status.name}"
            )

        piece = self.board.get(from_position)
        if piece is None:
            raise IllegalMoveError(f"There is no piece on {from_position}.")

        if piece.color != self.turn:
            raise NotYourTurnError(
                f"It is not {piece.color.name.lower()}'s turn. Waiting for {self.turn.name.lower()} to move."
            )

        move = next(
            (
                move
                for move in self._legal_moves_from(from_position)
                if move.to_position == to_position
            ),
            None,
        )
        if move is None:
            raise IllegalMoveError(f"Move not allowed: {from_position}{to_position}")
        return move

    def _validate_promotion(self, piece_type: PieceType) -> Position:
        if self.game_state.status != GameStatus.AWAITING_PROMOTION:
            raise GameStateError(
                f"No promotion pending. state: {self.game_state.status.name}"
            )

        # for the type checker: awaiting promotion always comes with a position
        position = self.game_state.position
        assert position is not None
        pawn = self.board.get(position)
        if pawn is None or pawn.piece_type != PieceType.PAWN:
            raise GameStateError(f"No pawn waiting for promotion on {position}.")

        if piece_type not in PROMOTION_OPTIONS:
            raise IllegalMoveError(f"A pawn cannot promote into a {piece_type.name.lower()}.")
        return position

    def _legal_moves_from(self, position: Position) -> list[Move]:
        """
        Legal moves of the piece on the given square
        ----

        1. generate candidate moves, using the basic movement rules (incl. en passant)
        2. add candidate castling moves for a king
        3. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.
        """
        piece = self.board.get(position)
        if piece is None:
            return []

        candidates = candidate_moves(position, self.board, self.en_passant_susceptible_pawn)
        if piece.piece_type == PieceType.KING:
            candidates.extend(self._castling_moves(position, piece.color))
        return filter_legal_moves(self.board, candidates, piece.color)

    def _has_legal_move(self, color: Color) -> bool:
        return any(
            self._legal_moves_from(position) for position, _ in self.board.pieces(color)
        )

    def _apply_move(self, move: Move) -> None:
        moving_piece = self.board.get(move.from_position)
        # for the type checker: validated before
        assert moving_piece is not None
        is_pawn_move = moving_piece.piece_type == PieceType.PAWN
        is_capture = (
            self.board.get(move.to_position) is not None
            or move.en_passant_capture is not None
        )
        reaches_promotion_rank = is_pawn_move_to_promotion_rank(move, self.board)

        self._revoke_castling_rights_if_needed(move, moving_piece)
        self.board.apply(move.changes(self.board))

        # fifty-move rule counter
        if is_pawn_move or is_capture:
            self.moves_since_capture = 0
        else:
            self.moves_since_capture += 1

        # only a fresh double step makes a pawn susceptible, and only until the next move
        is_double_step = is_pawn_move and abs(move.to_position.y - move.from_position.y) == 2
        self.en_passant_susceptible_pawn = move.to_position if is_double_step else None

        self.moves.append(move)

        if reaches_promotion_rank:
            self.game_state = GameState.awaiting_promotion(move.to_position)
            logger.debug("Pawn on %s awaiting promotion", move.to_position)
            return

        self._finish_turn(moving_piece.color)

    def _finish_turn(self, mover: Color) -> None:
        if mover == Color.BLACK:
            self.fullmove_number += 1
        self.turn = mover.flip()
        self._record_position()
        self.game_state = self._evaluate_state()

        if self.game_state.is_over:
            logger.info(
                "Game over after %s: %s",
                self.moves[-1].to_uci() if self.moves else "setup",
                self.game_state,
            )
        else:
            logger.debug("%s to move: %s", self.turn.name, self.game_state.status.name)

    # --- GAME STATE ---
    def _evaluate_state(self) -> GameState:
        """
        State as seen from the side to move
        ----

        1. in check without a legal move: checkmate (takes precedence over the draw rules)
        2. fifty-move rule / repetition: draw, regardless of mobility
        3. in check: check
        4. no legal move: stalemate, so a draw
        """
        color = self.turn
        in_check = is_in_check(self.board, color)
        has_legal_move = self._has_legal_move(color)

        if in_check and not has_legal_move:
            return GameState.checkmate(color)
        if self.moves_since_capture >= self.settings.fifty_move_limit:
            return GameState.draw(DrawReason.FIFTY_MOVE_RULE)
        if self._is_repetition():
            return GameState.draw(DrawReason.THREEFOLD_REPETITION)
        if in_check:
            return GameState.check(color)
        if not has_legal_move:
            return GameState.draw(DrawReason.STALEMATE)
        return GameState.normal()

    def _position_key(self) -> Hashable:
        """Two positions are the same if pieces, side to move, castling rights, and en passant options are."""
        return (
            self.board.snapshot(),
            self.turn,
            self.castling_rights.key(),
            self.en_passant_susceptible_pawn,
        )

    def _record_position(self) -> None:
        self.position_history[self._position_key()] += 1

    def _is_repetition(self) -> bool:
        if not self.settings.detect_repetition:
            return False
        return self.position_history[self._position_key()] >= self.settings.repetition_limit

    # -- CASTLING RULE HELPERS ---
    def _castling_moves(self, king_position: Position, color: Color) -> list[Move]:
        """
        Castling moves for the king on the given square
        ---

        **you are allowed to castle if**

        * Castling rights are not yet revoked (and king and rook are on their starting squares).
        * You are not currently in check (you cannot castle out of check).
        * All squares in between the king and the rook are empty.
        * The king does not pass through or land on a square that is under attack.
        """
        directions = self.castling_rights.directions(color)
        if not directions or is_in_check(self.board, color):
            return []

        opponent_color = color.flip()
        own_rook = Piece(PieceType.ROOK, color)
        moves: list[Move] = []
        for direction in directions:
            rule = CASTLING_RULES[direction]
            if king_position != rule.king_from or self.board.get(rule.rook_from) != own_rook:
                continue

            if any(self.board.get(square) is not None for square in squares_between(direction)):
                continue

            if is_any_square_attacked(self.board, king_path(direction), opponent_color):
                continue

            moves.append(candidate_castling_move(direction))
        return moves

    def _revoke_castling_rights_if_needed(self, move: Move, moving_piece: Piece) -> None:
        """
        Checks which rights should get revoked
        ----

        1. If you are moving your king (castling included) --> revoke both
        2. If a rook leaves its starting square --> revoke the rights in the direction of that rook
        3. If a piece lands on a rook's starting square (capturing it) --> revoke the rights in that direction
        """
        if moving_piece.piece_type == PieceType.KING:
            self.castling_rights.revoke_all(moving_piece.color)

        for direction in CastlingDirection:
            rook_home = CASTLING_RULES[direction].rook_from
            if rook_home in (move.from_position, move.to_position):
                self.castling_rights.revoke(direction)
