"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from chessrules.core.enums import Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, file_of, make_square, rank_of

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Castling flag -> (rook origin file, rook destination file)
_CASTLE_ROOK_FILES: dict[MoveFlag, tuple[int, int]] = {
    MoveFlag.CASTLE_KINGSIDE: (7, 5),
    MoveFlag.CASTLE_QUEENSIDE: (0, 3),
}


def en_passant_victim(move: Move) -> Square:
    """Square of the pawn removed by an en-passant capture."""
    return make_square(file_of(move.to_sq), rank_of(move.from_sq))


class Board:
    """Mutable 64-square board with incremental piece indexes.

    A flat value type: :meth:`copy` is cheap and the legality filter relies on
    it instead of undoing moves.
    """

    __slots__ = ("_squares", "_piece_bitboards", "_color_bitboards", "_king_counts")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color][piece_type-1] -> bitboard of occupied squares.
        self._piece_bitboards: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        # [color] -> bitboard of all occupied squares for that color.
        self._color_bitboards: list[int] = [0] * _COLOR_COUNT
        self._king_counts: list[int] = [0] * _COLOR_COUNT

    @staticmethod
    def _piece_type_index(piece_type: PieceType) -> int:
        return int(piece_type) - 1

    @staticmethod
    def _squares_from_bitboard(bitboard: int) -> list[Square]:
        squares: list[Square] = []
        while bitboard:
            lsb = bitboard & -bitboard
            squares.append(lsb.bit_length() - 1)
            bitboard ^= lsb
        return squares

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq]
        if old_piece == piece:
            return

        mask = 1 << sq

        if old_piece is not None:
            old_color_idx = int(old_piece.color)
            self._piece_bitboards[old_color_idx][
                self._piece_type_index(old_piece.piece_type)
            ] &= ~mask
            self._color_bitboards[old_color_idx] &= ~mask
            if old_piece.piece_type == PieceType.KING:
                self._king_counts[old_color_idx] -= 1

        self._squares[sq] = piece

        if piece is None:
            return

        color_idx = int(piece.color)
        self._piece_bitboards[color_idx][self._piece_type_index(piece.piece_type)] |= mask
        self._color_bitboards[color_idx] |= mask
        if piece.piece_type == PieceType.KING:
            self._king_counts[color_idx] += 1

    def __iter__(self) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares in index order as ``(square, piece)`` pairs."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return self._squares_from_bitboard(self.pieces_bitboard(color, piece_type))

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._piece_bitboards[int(color)][self._piece_type_index(piece_type)]

    def all_pieces_bitboard(self, color: Color) -> int:
        """Bitboard of all squares occupied by *color*."""
        return self._color_bitboards[int(color)]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return self._squares_from_bitboard(self.all_pieces_bitboard(color))

    def king_count(self, color: Color) -> int:
        return self._king_counts[int(color)]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        kings = self.pieces_bitboard(color, PieceType.KING)
        if not kings:
            raise ValueError(f"No {color.name} king on board")
        return (kings & -kings).bit_length() - 1

    # -- Mutation / copying -------------------------------------------------

    def apply_move(self, move: Move) -> Piece | None:
        """Carry out the piece movement of *move* and return the captured piece.

        Only touches placement: castling rights, clocks and the en-passant
        target belong to :class:`~chessrules.core.position.Position`. The move
        is not validated.
        """
        piece = self._squares[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on square {move.from_sq}")

        if move.flag == MoveFlag.EN_PASSANT:
            victim_sq = en_passant_victim(move)
            captured = self._squares[victim_sq]
            self[victim_sq] = None
        else:
            captured = self._squares[move.to_sq]

        self[move.from_sq] = None
        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            piece = Piece(piece.color, move.promotion)
        self[move.to_sq] = piece

        rook_files = _CASTLE_ROOK_FILES.get(move.flag)
        if rook_files is not None:
            rank = rank_of(move.from_sq)
            rook_from = make_square(rook_files[0], rank)
            rook_to = make_square(rook_files[1], rank)
            self[rook_to] = self._squares[rook_from]
            self[rook_from] = None

        return captured

    def copy(self) -> Board:
        b = Board.__new__(Board)
        b._squares = self._squares.copy()
        b._piece_bitboards = [row.copy() for row in self._piece_bitboards]
        b._color_bitboards = self._color_bitboards.copy()
        b._king_counts = self._king_counts.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * 64
        self._piece_bitboards = [[0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)]
        self._color_bitboards = [0] * _COLOR_COUNT
        self._king_counts = [0] * _COLOR_COUNT

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
