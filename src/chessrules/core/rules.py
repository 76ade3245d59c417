"""High-level chess rules: check, checkmate, stalemate classification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import GameState
from chessrules.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessrules.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Product policy: repetition and move-count draws are never adjudicated.
    # Only the raw halfmove clock is exposed through is_fifty_move_rule.

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return Rules.game_state(position) == GameState.CHECKMATE

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return Rules.game_state(position) == GameState.STALEMATE

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def game_state(position: Position) -> GameState:
        """Classify *position* for the side to move.

        ============  =============  ===========
        in check      legal move     state
        ============  =============  ===========
        no            yes            IN_PROGRESS
        yes           yes            CHECK
        yes           no             CHECKMATE
        no            no             STALEMATE
        ============  =============  ===========
        """
        gen = MoveGenerator(position)
        in_check = gen.is_in_check(position.side_to_move)
        if gen.has_legal_move():
            return GameState.CHECK if in_check else GameState.IN_PROGRESS
        return GameState.CHECKMATE if in_check else GameState.STALEMATE
