"""Perft: count leaf nodes of the legal move tree.

Used to check the move generator against published reference counts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessrules.core.position import Position


def perft(position: Position, depth: int) -> int:
    """Number of legal move sequences of length *depth* from *position*."""
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        child = position.copy()
        child.make_move(move)
        nodes += perft(child, depth - 1)
    return nodes


def divide(position: Position, depth: int) -> dict[str, int]:
    """Per root move node counts, keyed by UCI string."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    counts: dict[str, int] = {}
    for move in MoveGenerator(position).generate_legal_moves():
        child = position.copy()
        child.make_move(move)
        counts[move.uci] = perft(child, depth - 1)
    return counts
