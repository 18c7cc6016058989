from __future__ import annotations

from roastchess.engine.board import Board, Color, Square
from roastchess.eval import material, material_score


def test_initial_position_is_balanced() -> None:
    b = Board.initial()
    assert material(b, Color.WHITE) == 39
    assert material_score(b, Color.WHITE) == 0
    assert material_score(b, Color.BLACK) == 0


def test_missing_pawn_is_antisymmetric() -> None:
    b = Board.initial().place(Square.parse("e7"), None)
    assert material_score(b, Color.WHITE) == 1
    assert material_score(b, Color.BLACK) == -1


def test_kings_count_for_nothing() -> None:
    b = Board.from_fen("4k3/8/8/8/8/8/8/4K3")
    assert material_score(b, Color.WHITE) == 0


def test_queen_against_rook() -> None:
    b = Board.from_fen("4k2r/8/8/8/8/8/8/3QK3")
    assert material_score(b, Color.WHITE) == 4
    assert material_score(b, Color.BLACK) == -4
