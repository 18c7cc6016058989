from __future__ import annotations

import random

import pytest

from roastchess.engine.board import Color, Square
from roastchess.engine.game import (
    Game,
    GameMode,
    GameOverError,
    IllegalMoveError,
    NoHintsLeftError,
)
from roastchess.engine.move import parse_move
from roastchess.engine.rules import GameStatus
from roastchess.search.service import Difficulty, MoveSelector


def play(g: Game, *moves: str) -> None:
    for m in moves:
        g.apply_move(parse_move(m))


def test_new_game_defaults() -> None:
    g = Game.new()
    assert g.turn is Color.WHITE
    assert g.mode is GameMode.PVP
    assert g.hints == {Color.WHITE: 3, Color.BLACK: 3}
    assert len(g.legal_moves()) == 20
    assert not g.is_over and g.winner is None
    assert g.to_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 1"


def test_wrong_colour_and_illegal_moves_are_rejected() -> None:
    g = Game.new()
    with pytest.raises(IllegalMoveError):
        g.apply_move(parse_move("e7e5"))
    with pytest.raises(IllegalMoveError):
        g.apply_move(parse_move("e2e5"))
    with pytest.raises(IllegalMoveError):
        g.apply_move(parse_move("e3e4"))
    # Nothing changed.
    assert g.turn is Color.WHITE and g.history == []


def test_fen_after_double_push_names_en_passant_square() -> None:
    g = Game.new()
    play(g, "e2e4")
    assert g.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - e3 0 1"
    play(g, "g8f6")
    assert g.to_fen().endswith(" w - - 0 2")
    assert g.notation == ["e2-e4", "Ng8-f6"]
    assert g.move_history_uci() == ["e2e4", "g8f6"]


def test_fools_mate() -> None:
    g = Game.new()
    play(g, "f2f3", "e7e5", "g2g4", "d8h4")
    assert g.state.status is GameStatus.CHECKMATE
    assert g.winner == "black"
    assert g.is_over
    assert g.notation[-1] == "Qd8-h4"
    assert g.checked_king() == Square.parse("e1")
    with pytest.raises(GameOverError):
        g.apply_move(parse_move("a2a3"))
    with pytest.raises(GameOverError):
        g.use_hint(MoveSelector(random.Random(0)))


def test_stalemate_from_fen_is_a_draw() -> None:
    g = Game.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert g.state.status is GameStatus.STALEMATE
    assert g.winner == "draw"
    assert not g.in_check()


def test_bot_move_in_pve() -> None:
    g = Game.new(GameMode.PVE, Difficulty.NOOB)
    play(g, "e2e4")
    assert g.is_bot_turn()
    played = g.bot_move(MoveSelector(random.Random(1)))
    assert g.turn is Color.WHITE
    assert g.history[-1] == played
    assert g.board[played.to_sq] is not None
    assert g.board[played.to_sq].color is Color.BLACK


def test_bot_move_refused_when_not_bot_turn() -> None:
    selector = MoveSelector(random.Random(0))
    with pytest.raises(IllegalMoveError):
        Game.new().bot_move(selector)
    with pytest.raises(IllegalMoveError):
        Game.new(GameMode.PVE).bot_move(selector)


def test_hints_are_consumed_and_not_replenished() -> None:
    g = Game.new(hint_allowance=1)
    selector = MoveSelector(random.Random(3))
    hint = g.use_hint(selector)
    assert hint in g.legal_moves()
    assert g.hints[Color.WHITE] == 0
    assert g.turn is Color.WHITE
    with pytest.raises(NoHintsLeftError):
        g.use_hint(selector)
    play(g, "e2e4")
    assert g.use_hint(selector) is not None
    assert g.hints == {Color.WHITE: 0, Color.BLACK: 0}


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "8/8/8/8/8/8/8/8 x - - 0 1",
        "4k3/8/8/8/8/8/8/4K3 w Kz - 0 1",
        "4k3/8/8/8/8/8/8/4K3 w - e6 0 1",
        "4k3/8/8/8/8/8/8/4K3 w - - 0 one",
    ],
)
def test_from_fen_rejects_bad_input(fen: str) -> None:
    with pytest.raises(ValueError):
        Game.from_fen(fen)
