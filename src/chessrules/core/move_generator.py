"""Pseudo-legal move generation and the legality filter built on top of it."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Final

from chessrules.core import attacks
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, make_square

if TYPE_CHECKING:
    from chessrules.core.position import Position


PROMOTION_TYPES: Final[tuple[PieceType, ...]] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# Per colour: (forward step, start rank, promotion rank)
_PAWN_GEOMETRY: Final[tuple[tuple[int, int, int], tuple[int, int, int]]] = (
    (8, 1, 7),
    (-8, 6, 0),
)

_SLIDER_RAYS: Final = {
    PieceType.BISHOP: attacks.BISHOP_RAYS,
    PieceType.ROOK: attacks.ROOK_RAYS,
    PieceType.QUEEN: attacks.QUEEN_RAYS,
}

# Per colour: (kingside right, queenside right)
_CASTLING_RIGHTS: Final = (
    (CastlingRights.WHITE_KINGSIDE, CastlingRights.WHITE_QUEENSIDE),
    (CastlingRights.BLACK_KINGSIDE, CastlingRights.BLACK_QUEENSIDE),
)


class MoveGenerator:
    """Generates moves for a given :class:`Position`.

    Legality is decided by playing each candidate on a copy of the board and
    asking :mod:`chessrules.core.attacks` whether the mover's king is hit.
    The position itself is never modified.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return [m for m in self.generate_pseudo_legal_moves() if self.is_legal(m)]

    def generate_legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the piece on *sq* (empty unless it belongs to the side to move)."""
        return [
            m for m in self.generate_pseudo_legal_moves_from(sq) if self.is_legal(m)
        ]

    def has_legal_move(self) -> bool:
        """Whether the side to move has at least one legal move."""
        return any(self.is_legal(m) for m in self._iter_pseudo_legal_moves())

    def is_legal(self, move: Move) -> bool:
        """Would *move* (assumed pseudo-legal) leave the mover's king safe?"""
        board = self._board.copy()
        board.apply_move(move)
        return not attacks.is_in_check(board, self._pos.side_to_move)

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        return list(self._iter_pseudo_legal_moves())

    def generate_pseudo_legal_moves_from(self, sq: Square) -> list[Move]:
        """Pseudo-legal moves of the piece on *sq*."""
        piece = self._board[sq]
        moves: list[Move] = []
        if piece is None or piece.color != self._pos.side_to_move:
            return moves
        self._gen_piece(sq, piece.color, piece.piece_type, moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return attacks.is_in_check(self._board, color)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        return attacks.is_square_attacked(self._board, sq, by_color)

    # -- Piece-specific generators (private) -------------------------------

    def _iter_pseudo_legal_moves(self) -> Iterator[Move]:
        color = self._pos.side_to_move
        board = self._board
        for piece_type in PieceType:
            for sq in board.pieces(color, piece_type):
                moves: list[Move] = []
                self._gen_piece(sq, color, piece_type, moves)
                yield from moves

    def _gen_piece(
        self, sq: Square, color: Color, piece_type: PieceType, moves: list[Move]
    ) -> None:
        if piece_type == PieceType.PAWN:
            self._gen_pawn(sq, color, moves)
        elif piece_type == PieceType.KNIGHT:
            self._gen_steps(sq, color, attacks.KNIGHT_TARGETS[sq], moves)
        elif piece_type == PieceType.KING:
            self._gen_steps(sq, color, attacks.KING_TARGETS[sq], moves)
            self._gen_castling(sq, color, moves)
        else:
            self._gen_sliding(sq, color, _SLIDER_RAYS[piece_type][sq], moves)

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        step, start_rank, promo_rank = _PAWN_GEOMETRY[int(color)]
        file_idx = sq & 7
        rank_idx = sq >> 3
        if rank_idx == promo_rank:
            return

        def add(to_sq: Square, flag: MoveFlag = MoveFlag.NORMAL) -> None:
            if to_sq >> 3 == promo_rank:
                for pt in PROMOTION_TYPES:
                    moves.append(Move(sq, to_sq, MoveFlag.PROMOTION, pt))
            else:
                moves.append(Move(sq, to_sq, flag))

        one_step = sq + step
        if board.is_empty(one_step):
            add(one_step)
            two_step = one_step + step
            if rank_idx == start_rank and board.is_empty(two_step):
                moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            if not 0 <= file_idx + df < 8:
                continue
            cap_sq = one_step + df
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    add(cap_sq)
            elif cap_sq == self._pos.en_passant and board[cap_sq - step] == Piece(
                color.opposite, PieceType.PAWN
            ):
                moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        kingside, queenside = _CASTLING_RIGHTS[int(color)]
        castling = self._pos.castling
        if not castling & (kingside | queenside):
            return

        rank = 0 if color == Color.WHITE else 7
        if king_sq != make_square(4, rank):
            return

        opponent = color.opposite
        board = self._board
        if attacks.is_square_attacked(board, king_sq, opponent):
            return

        def rook_home(file_idx: int) -> bool:
            rook = board[make_square(file_idx, rank)]
            return (
                rook is not None
                and rook.color == color
                and rook.piece_type == PieceType.ROOK
            )

        def safe(*files: int) -> bool:
            return not any(
                attacks.is_square_attacked(board, make_square(f, rank), opponent)
                for f in files
            )

        def empty(*files: int) -> bool:
            return all(board.is_empty(make_square(f, rank)) for f in files)

        if castling & kingside and rook_home(7) and empty(5, 6) and safe(5, 6):
            moves.append(
                Move(king_sq, make_square(6, rank), MoveFlag.CASTLE_KINGSIDE)
            )

        if castling & queenside and rook_home(0) and empty(1, 2, 3) and safe(2, 3):
            moves.append(
                Move(king_sq, make_square(2, rank), MoveFlag.CASTLE_QUEENSIDE)
            )
