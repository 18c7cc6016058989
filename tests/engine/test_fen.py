from __future__ import annotations

import pytest

from roastchess.engine.board import Board, Color, Square, STARTPOS_PLACEMENT
from roastchess.engine.game import Game


def test_initial_board_round_trip() -> None:
    assert Board.initial().to_fen() == STARTPOS_PLACEMENT
    assert Board.from_fen(STARTPOS_PLACEMENT) == Board.initial()


def test_full_fen_is_accepted_by_board() -> None:
    b = Board.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    assert b.find_king(Color.WHITE) == Square.parse("e1")
    assert b.find_king(Color.BLACK) == Square.parse("e8")


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "8/8/8/8/8/8/8",
        "8/8/8/8/8/8/8/9",
        "8/8/8/8/8/8/8/7x",
        "8/8/8/8/8/8/8/K8",
    ],
)
def test_invalid_placements_raise(fen: str) -> None:
    with pytest.raises(ValueError):
        Board.from_fen(fen)


def test_square_names() -> None:
    assert Square.parse("a8") == Square(0, 0)
    assert Square.parse("h1") == Square(7, 7)
    assert Square(6, 4).name == "e2"
    with pytest.raises(ValueError):
        Square.parse("i9")


def test_game_fen_round_trip_with_en_passant() -> None:
    fen = "4k3/8/8/3Pp3/8/8/8/4K3 w - e6 0 7"
    g = Game.from_fen(fen)
    assert g.turn is Color.WHITE
    assert g.last_move is not None and g.last_move.to_uci() == "e7e5"
    assert g.to_fen() == fen


def test_game_fen_rejects_bogus_en_passant_target() -> None:
    with pytest.raises(ValueError):
        Game.from_fen("4k3/8/8/3P4/8/8/8/4K3 w - e6 0 1")
    with pytest.raises(ValueError):
        Game.from_fen("4k3/8/8/8/8/8/8/4K3 x - - 0 1")
