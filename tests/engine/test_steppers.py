from __future__ import annotations

from roastchess.engine.board import Board, Square
from roastchess.engine.movegen import legal_moves


def dests(fen: str, sq: str) -> set[str]:
    b = Board.from_fen(fen)
    s = Square.parse(sq)
    return {to.name for to in legal_moves(b[s], s, b, None)}


def test_knight_from_corner() -> None:
    assert dests("4k3/8/8/8/8/8/8/N3K3", "a1") == {"b3", "c2"}


def test_knight_skips_friendly_squares_and_captures_enemy() -> None:
    # Knight g1 in the initial position: e2 is own pawn, f3/h3 are free.
    b = Board.initial()
    g1 = Square.parse("g1")
    assert {to.name for to in legal_moves(b[g1], g1, b, None)} == {"f3", "h3"}
    # Black pawn on f3 can be taken.
    assert "f3" in dests("4k3/8/8/8/8/5p2/8/4K1N1", "g1")


def test_king_cannot_step_into_attacked_squares() -> None:
    # Black rook a2 controls the second rank.
    assert dests("4k3/8/8/8/8/8/r7/4K3", "e1") == {"d1", "f1"}


def test_king_may_take_unprotected_attacker() -> None:
    assert dests("4k3/8/8/8/8/8/3q4/4K3", "e1") == {"f1", "d2"}


def test_king_may_not_take_protected_attacker() -> None:
    # Rook d8 defends the queen on d2.
    assert dests("3rk3/8/8/8/8/8/3q4/4K3", "e1") == {"f1"}


def test_no_castling_destinations() -> None:
    assert dests("r3k2r/8/8/8/8/8/8/R3K2R", "e1") == {"d1", "d2", "e2", "f2", "f1"}
