"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessrules.core.notation import position_from_fen
from chessrules.core.position import Position
from chessrules.core.types import FILE_NAMES, parse_square
from chessrules.game import Game

# Reference positions from https://www.chessprogramming.org/Perft_Results
KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
CASTLING_FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"

A1, B1, C1, D1, E1, F1, G1, H1 = (parse_square(f"{f}1") for f in FILE_NAMES)
A8, B8, C8, D8, E8, F8, G8, H8 = (parse_square(f"{f}8") for f in FILE_NAMES)
D4, D5, D6, D7 = (parse_square(f"d{r}") for r in "4567")
E2, E3, E4, E5, E7 = (parse_square(f"e{r}") for r in "23457")


@pytest.fixture
def game() -> Game:
    """Fresh game in the starting position."""
    return Game()


@pytest.fixture
def castling_position() -> Position:
    """Both sides with clear back ranks and all castling rights."""
    return position_from_fen(CASTLING_FEN)


def play(game: Game, *moves: str) -> None:
    """Play space-free UCI moves (``e2e4``, ``e7e8q``), failing on the first illegal one."""
    for uci in moves:
        state = game.make_move(uci[:2], uci[2:])
        assert state is not None, f"{uci} rejected in {game.get_fen()}"
