from __future__ import annotations

from roastchess.engine.board import Board, Color
from roastchess.engine.game import Game
from roastchess.engine.rules import GameStatus, TerminalState, terminal_state


def test_initial_position_is_ongoing() -> None:
    b = Board.initial()
    assert terminal_state(b, Color.WHITE, None, Color.BLACK) == TerminalState(GameStatus.ONGOING)


def test_queen_mate_in_the_corner() -> None:
    # Black king a8, white queen a7 defended by the king on b6.
    b = Board.from_fen("k7/Q7/1K6/8/8/8/8/8")
    st = terminal_state(b, Color.BLACK, None, Color.WHITE)
    assert st.status is GameStatus.CHECKMATE
    assert st.winner is Color.WHITE
    assert st.is_over


def test_supported_queen_mate_on_g7() -> None:
    b = Board.from_fen("7k/6Q1/6K1/8/8/8/8/8")
    st = terminal_state(b, Color.BLACK, None, Color.WHITE)
    assert st.status is GameStatus.CHECKMATE and st.winner is Color.WHITE


def test_undefended_queen_can_be_taken() -> None:
    b = Board.from_fen("k7/Q7/8/8/8/8/8/7K")
    assert terminal_state(b, Color.BLACK, None, Color.WHITE).status is GameStatus.ONGOING


def test_stalemate_when_no_moves_and_not_in_check() -> None:
    # Kg6, Qf7 vs kh8: black to move has no legal move but is not attacked.
    b = Board.from_fen("7k/5Q2/6K1/8/8/8/8/8")
    st = terminal_state(b, Color.BLACK, None, Color.WHITE)
    assert st.status is GameStatus.STALEMATE
    assert st.winner is None


def test_game_from_mated_position_reports_winner() -> None:
    g = Game.from_fen("k7/Q7/1K6/8/8/8/8/8 b - - 0 1")
    assert g.is_over
    assert g.winner == "white"
    assert g.legal_moves() == []

    s = Game.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert s.winner == "draw"
