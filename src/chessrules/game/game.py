"""Game aggregate — the string-coordinate API host applications talk to."""

from __future__ import annotations

import logging

from chessrules.core.enums import GameState, MoveFlag
from chessrules.core.errors import ChessError, IllegalMoveError, InvalidFenError
from chessrules.core.move import Move, parse_promotion
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import position_from_fen, position_to_fen
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import parse_square, square_name

_LOGGER = logging.getLogger(__name__)


class Game:
    """A single chess game owned by its caller.

    Every query recomputes from the current position, so the reported
    :class:`GameState` can never drift from the board. Operations that take
    user input return ``None`` instead of raising when the input is malformed
    or illegal, and leave the game untouched in that case.

    Not thread-safe: callers sharing one instance must serialise access.
    """

    __slots__ = ("_position",)

    def __init__(self) -> None:
        self._position = Position()

    @classmethod
    def new(cls) -> Game:
        """Game in the standard starting position."""
        return cls()

    @classmethod
    def from_fen(cls, fen: str) -> Game:
        """Game starting from *fen*; raises :class:`InvalidFenError` if malformed."""
        game = cls()
        game._position = position_from_fen(fen)
        return game

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        """Snapshot of the current position (a copy)."""
        return self._position.copy()

    def get_game_state(self) -> GameState:
        return Rules.game_state(self._position)

    def get_turn(self) -> str:
        """``"White"`` or ``"Black"``."""
        return str(self._position.side_to_move)

    def get_halfmove(self) -> int:
        return self._position.halfmove_clock

    def get_fullmove(self) -> int:
        return self._position.fullmove_number

    def get_fen(self) -> str:
        return position_to_fen(self._position)

    def legal_moves(self) -> list[Move]:
        """All legal moves for the side to move."""
        return MoveGenerator(self._position).generate_legal_moves()

    def get_possible_moves(self, square: str) -> list[str] | None:
        """Destination squares reachable by the piece on *square*.

        ``None`` if *square* is malformed, does not hold a piece of the side
        to move, or that piece has no legal move. The four promotion choices
        onto one square are reported once.
        """
        try:
            origin = parse_square(square)
        except ChessError as exc:
            _LOGGER.debug("get_possible_moves(%r): %s", square, exc)
            return None

        destinations: list[str] = []
        for move in MoveGenerator(self._position).generate_legal_moves_from(origin):
            name = square_name(move.to_sq)
            if name not in destinations:
                destinations.append(name)
        return destinations or None

    # ── Mutations ────────────────────────────────────────────────────────

    def make_move(
        self, from_sq: str, to_sq: str, promotion: str | None = None
    ) -> GameState | None:
        """Play *from_sq* → *to_sq* and return the new state, or ``None`` if illegal.

        The promotion piece (``Q``, ``R``, ``N`` or ``B``, any case) is given
        either as a third character of *to_sq* (``"e8q"``) or as *promotion*.
        It is required exactly when a pawn reaches the last rank and rejected
        otherwise.
        """
        try:
            move = self._resolve_move(from_sq, to_sq, promotion)
        except ChessError as exc:
            _LOGGER.debug("Rejected move %r -> %r: %s", from_sq, to_sq, exc)
            return None

        self._position.make_move(move)
        return self.get_game_state()

    def load_fen(self, fen: str) -> GameState | None:
        """Replace the position with *fen*; ``None`` (and no change) if malformed."""
        try:
            position = position_from_fen(fen)
        except InvalidFenError as exc:
            _LOGGER.debug("Rejected FEN: %s", exc)
            return None

        self._position = position
        return self.get_game_state()

    # ── Internal ─────────────────────────────────────────────────────────

    def _resolve_move(
        self, from_sq: str, to_sq: str, promotion: str | None
    ) -> Move:
        """Map coordinate text onto the one legal :class:`Move` it names."""
        target_text, inline_promotion = to_sq[:2], to_sq[2:]
        if inline_promotion:
            if len(inline_promotion) != 1:
                raise IllegalMoveError(f"Invalid destination: {to_sq!r}")
            if promotion is not None:
                raise IllegalMoveError("Promotion piece given twice")
            promotion = inline_promotion

        origin = parse_square(from_sq)
        target = parse_square(target_text)
        promotion_type = parse_promotion(promotion) if promotion is not None else None

        position = self._position
        piece = position.board[origin]
        if piece is None:
            raise IllegalMoveError(f"No piece on {from_sq}")
        if piece.color != position.side_to_move:
            raise IllegalMoveError(f"{piece.color} piece on {from_sq}, not its turn")

        candidates = [
            move
            for move in MoveGenerator(position).generate_legal_moves_from(origin)
            if move.to_sq == target
        ]
        if not candidates:
            raise IllegalMoveError(f"{from_sq}{target_text} is not legal")

        if candidates[0].flag != MoveFlag.PROMOTION:
            if promotion_type is not None:
                raise IllegalMoveError(f"{from_sq}{target_text} is not a promotion")
            return candidates[0]

        if promotion_type is None:
            raise IllegalMoveError(f"{from_sq}{target_text} needs a promotion piece")
        for move in candidates:
            if move.promotion == promotion_type:
                return move
        raise IllegalMoveError(f"Cannot promote to {promotion_type.name}")

    def __repr__(self) -> str:
        return repr(self._position.board)
