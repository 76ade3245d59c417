"""Attack detection and the precomputed lookup tables it shares with move generation.

Everything here is a pure geometric query over a :class:`Board` snapshot. It
never asks whether the attacking side would expose its own king, so move
generation can call into it without recursing.
"""

from __future__ import annotations

from typing import Final

from chessrules.core.board import Board
from chessrules.core.enums import Color, PieceType
from chessrules.core.types import Square, make_square

KNIGHT_OFFSETS: Final[tuple[tuple[int, int], ...]] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: Final[tuple[tuple[int, int], ...]] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: Final[tuple[tuple[int, int], ...]] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: Final[tuple[tuple[int, int], ...]] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: Final[tuple[tuple[int, int], ...]] = BISHOP_DIRS + ROOK_DIRS


# -- Precomputed lookup tables ---------------------------------------------


def _on_board(file_idx: int, rank_idx: int) -> bool:
    return 0 <= file_idx < 8 and 0 <= rank_idx < 8


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        targets.append(
            tuple(
                make_square(file_idx + df, rank_idx + dr)
                for df, dr in offsets
                if _on_board(file_idx + df, rank_idx + dr)
            )
        )
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = []
    for sq_targets in targets:
        mask = 0
        for to_sq in sq_targets:
            mask |= 1 << to_sq
        masks.append(mask)
    return tuple(masks)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Per colour: squares a pawn of that colour must stand on to hit *sq*.

    A white pawn attacks upwards, so it sits one rank below its target; a
    black pawn sits one rank above.
    """
    per_color: list[tuple[int, ...]] = []
    for behind in (-1, 1):
        masks: list[int] = []
        for sq in range(64):
            file_idx = sq & 7
            rank_idx = sq >> 3
            mask = 0
            for df in (-1, 1):
                if _on_board(file_idx + df, rank_idx + behind):
                    mask |= 1 << make_square(file_idx + df, rank_idx + behind)
            masks.append(mask)
        per_color.append(tuple(masks))
    return (per_color[0], per_color[1])


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while _on_board(af, ar):
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


KNIGHT_TARGETS: Final = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS: Final = _build_targets(KING_OFFSETS)
BISHOP_RAYS: Final = _build_rays(BISHOP_DIRS)
ROOK_RAYS: Final = _build_rays(ROOK_DIRS)
QUEEN_RAYS: Final = _build_rays(QUEEN_DIRS)

_KNIGHT_ATTACK_MASKS: Final = _build_attack_masks(KNIGHT_TARGETS)
_KING_ATTACK_MASKS: Final = _build_attack_masks(KING_TARGETS)
_PAWN_ATTACKER_MASKS: Final = _build_pawn_attacker_masks()

_DIAGONAL_SLIDERS: Final = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_SLIDERS: Final = (PieceType.ROOK, PieceType.QUEEN)


# -- Queries ----------------------------------------------------------------


def _ray_hits(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    sliders: tuple[PieceType, PieceType],
) -> bool:
    for ray in rays:
        for to_sq in ray:
            piece = board[to_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in sliders:
                return True
            break
    return False


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color* on *board*?"""
    if (
        board.pieces_bitboard(by_color, PieceType.PAWN)
        & _PAWN_ATTACKER_MASKS[int(by_color)][sq]
    ):
        return True

    if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
        return True

    if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
        return True

    queens = board.pieces_bitboard(by_color, PieceType.QUEEN)

    if (queens or board.pieces_bitboard(by_color, PieceType.BISHOP)) and _ray_hits(
        board, BISHOP_RAYS[sq], by_color, _DIAGONAL_SLIDERS
    ):
        return True

    if (queens or board.pieces_bitboard(by_color, PieceType.ROOK)) and _ray_hits(
        board, ROOK_RAYS[sq], by_color, _STRAIGHT_SLIDERS
    ):
        return True

    return False


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?"""
    return is_square_attacked(board, board.king_square(color), color.opposite)
