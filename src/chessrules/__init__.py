"""In-memory chess rules engine with FEN support."""

from chessrules.core import (
    STARTING_FEN,
    Color,
    GameState,
    Move,
    PieceType,
)
from chessrules.game import Game

__all__ = [
    "STARTING_FEN",
    "Color",
    "Game",
    "GameState",
    "Move",
    "PieceType",
]
