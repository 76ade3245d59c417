"""Position — complete game state (board + metadata) and move execution."""

from __future__ import annotations

from typing import Final

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.types import Square, file_of, make_square, rank_of

# Any move from or onto a rook's home corner revokes the matching right:
# either that rook moved away or it was captured there.
_ROOK_CORNERS: Final[dict[Square, CastlingRights]] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}
_KING_RIGHTS: Final[tuple[CastlingRights, CastlingRights]] = (
    CastlingRights.WHITE_BOTH,
    CastlingRights.BLACK_BOTH,
)


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    :meth:`make_move` executes a move that the caller has already checked
    against the legal move list; it does not validate on its own.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number

    # ── Core move operation ──────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move* and advance the side to move."""
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        # Placement: relocation, captures (incl. en passant), rook slide
        captured = self.board.apply_move(move)

        self._update_castling(move, piece.color, piece.piece_type)

        # En passant target for the opponent
        if move.flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        else:
            self.en_passant = None

        # Clocks
        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(self, move: Move, color: Color, piece_type: PieceType) -> None:
        rights = self.castling
        if piece_type == PieceType.KING:
            rights &= ~_KING_RIGHTS[int(color)]

        for sq in (move.from_sq, move.to_sq):
            corner_right = _ROOK_CORNERS.get(sq)
            if corner_right is not None:
                rights &= ~corner_right

        self.castling = rights

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Independent copy; mutating it never affects ``self``."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{self.board!r}\n"
            f"{self.side_to_move} to move, castling={self.castling!r}, "
            f"ep={self.en_passant}, halfmove={self.halfmove_clock}, "
            f"fullmove={self.fullmove_number}"
        )
