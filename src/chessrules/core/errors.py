"""Exceptions raised by the core layer.

All of them derive from :class:`ValueError` so callers that only care about
"bad input" can keep catching that.
"""

from __future__ import annotations


class ChessError(ValueError):
    """Base class for rule-engine input errors."""


class InvalidSquareError(ChessError):
    """A coordinate string is not of the form ``[a-h][1-8]``."""


class InvalidFenError(ChessError):
    """A FEN string could not be decoded into a valid position."""


class IllegalMoveError(ChessError):
    """A move is not legal in the current position."""
