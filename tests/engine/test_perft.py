from __future__ import annotations

import pytest

from roastchess.engine.board import Board, Color
from roastchess.engine.game import Game
from roastchess.engine.perft import perft


def test_perft_startpos_depths_1_3() -> None:
    b = Board.initial()
    assert perft(b, Color.WHITE, None, 0) == 1
    assert perft(b, Color.WHITE, None, 1) == 20
    assert perft(b, Color.WHITE, None, 2) == 400
    assert perft(b, Color.WHITE, None, 3) == 8902


def test_perft_rook_endgame_with_en_passant_pins() -> None:
    # Classic "position 3": no castling, en passant along a pinned rank.
    g = Game.from_fen("8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1")
    assert perft(g.board, g.turn, g.last_move, 1) == 14
    assert perft(g.board, g.turn, g.last_move, 2) == 191
    assert perft(g.board, g.turn, g.last_move, 3) == 2812


def test_perft_negative_depth_raises() -> None:
    with pytest.raises(ValueError):
        perft(Board.initial(), Color.WHITE, None, -1)
