"""Game layer — the aggregate host applications hold on to.

Quick start::

    from chessrules.game import Game

    game = Game()
    game.make_move("e2", "e4")
    print(game.get_fen())
"""

from chessrules.game.game import Game

__all__ = ["Game"]
