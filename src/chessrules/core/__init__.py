"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import MoveGenerator, Rules, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in MoveGenerator(pos).generate_legal_moves():
        print(move)
    print(Rules.game_state(pos))
"""

from chessrules.core.attacks import is_in_check, is_square_attacked
from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, GameState, MoveFlag, PieceType
from chessrules.core.errors import (
    ChessError,
    IllegalMoveError,
    InvalidFenError,
    InvalidSquareError,
)
from chessrules.core.move import Move, parse_promotion
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.perft import divide, perft
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameState",
    "MoveFlag",
    "PieceType",
    # Errors
    "ChessError",
    "IllegalMoveError",
    "InvalidFenError",
    "InvalidSquareError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_promotion",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    # Attack queries
    "is_in_check",
    "is_square_attacked",
    # Notation
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    # Tooling
    "divide",
    "perft",
]
