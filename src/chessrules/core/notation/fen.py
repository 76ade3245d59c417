"""FEN parsing and serialization."""

from __future__ import annotations

from typing import Final

from chessrules.core import attacks
from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.errors import InvalidFenError, InvalidSquareError
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN: Final = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_FIELD_COUNT: Final = 6
_EMPTY_RUN_DIGITS: Final = "12345678"

# Fixed output order of the castling field.
_CASTLING_CHARS: Final[tuple[tuple[str, CastlingRights], ...]] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)
_SIDE_CHARS: Final[dict[str, Color]] = {"w": Color.WHITE, "b": Color.BLACK}


def _parse_counter(text: str, name: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise InvalidFenError(f"Invalid FEN {name}: {text!r}")
    return int(text)


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidFenError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in _EMPTY_RUN_DIGITS:
                file += int(ch)
            else:
                if file >= 8:
                    raise InvalidFenError(f"Invalid FEN rank width: {fen!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise InvalidFenError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise InvalidFenError(f"Invalid FEN rank width: {fen!r}")
    return board


def _parse_castling(castling_part: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if castling_part == "-":
        return castling
    rights = dict(_CASTLING_CHARS)
    seen: set[str] = set()
    for ch in castling_part:
        right = rights.get(ch)
        if right is None or ch in seen:
            raise InvalidFenError(f"Invalid FEN castling field: {castling_part!r}")
        seen.add(ch)
        castling |= right
    return castling


def _parse_en_passant(ep_part: str, side: Color) -> Square | None:
    if ep_part == "-":
        return None
    try:
        ep = parse_square(ep_part)
    except InvalidSquareError:
        raise InvalidFenError(f"Invalid FEN en-passant square: {ep_part!r}") from None
    expected_ep_rank = 5 if side == Color.WHITE else 2
    if rank_of(ep) != expected_ep_rank:
        raise InvalidFenError(
            f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
        )
    return ep


def _check_en_passant(board: Board, side: Color, ep: Square, fen: str) -> None:
    """The target must sit behind a pawn that has just made a double step."""
    step = 8 if side == Color.WHITE else -8
    pushed_pawn = Piece(side.opposite, PieceType.PAWN)
    if (
        board[ep - step] != pushed_pawn
        or not board.is_empty(ep)
        or not board.is_empty(ep + step)
    ):
        raise InvalidFenError(
            f"Invalid FEN en-passant square {square_name(ep)!r} for placement: {fen!r}"
        )


def _check_playable(board: Board, side: Color, fen: str) -> None:
    """Reject placements the rule engine cannot play from."""
    for color in Color:
        if board.king_count(color) != 1:
            raise InvalidFenError(f"FEN needs exactly one {color.name} king: {fen!r}")

    back_ranks = 0xFF | (0xFF << 56)
    for color in Color:
        if board.pieces_bitboard(color, PieceType.PAWN) & back_ranks:
            raise InvalidFenError(f"FEN has a pawn on the first or last rank: {fen!r}")

    if attacks.is_in_check(board, side.opposite):
        raise InvalidFenError(f"FEN side not to move is in check: {fen!r}")


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    All six fields are required. Raises :class:`InvalidFenError` on any
    malformed field or on a placement that cannot be played from.
    """
    parts = fen.split(" ")
    if len(parts) != _FIELD_COUNT:
        raise InvalidFenError(f"Invalid FEN (need {_FIELD_COUNT} fields): {fen!r}")

    placement, side_part, castling_part, ep_part, halfmove_part, fullmove_part = parts

    # 1. Piece placement
    board = _parse_placement(placement, fen)

    # 2. Side to move
    side = _SIDE_CHARS.get(side_part)
    if side is None:
        raise InvalidFenError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = _parse_castling(castling_part)

    # 4. En passant
    ep = _parse_en_passant(ep_part, side)

    # 5–6. Clocks
    halfmove = _parse_counter(halfmove_part, "halfmove clock")
    fullmove = _parse_counter(fullmove_part, "fullmove number")
    if fullmove < 1:
        raise InvalidFenError(f"Invalid FEN fullmove number: {fullmove_part!r}")

    _check_playable(board, side, fen)
    if ep is not None:
        _check_en_passant(board, side, ep, fen)

    return Position(board, side, castling, ep, halfmove, fullmove)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right)
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
