from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .board import Board, Color
from .move import Move
from .movegen import has_legal_move, king_in_check


class GameStatus(str, Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


@dataclass(frozen=True)
class TerminalState:
    status: GameStatus
    winner: Optional[Color] = None

    @property
    def is_over(self) -> bool:
        return self.status is not GameStatus.ONGOING


ONGOING = TerminalState(GameStatus.ONGOING)


def terminal_state(
    board: Board,
    side_to_move: Color,
    last_move: Optional[Move],
    just_moved: Color,
) -> TerminalState:
    """Decide whether ``side_to_move`` is checkmated, stalemated, or still playing.

    Args:
        board (Board): Position after the latest move.
        side_to_move (Color): Side whose turn it now is.
        last_move (Optional[Move]): The move just played, for en passant.
        just_moved (Color): Side that played ``last_move``; wins on checkmate.

    Returns:
        TerminalState: ``ONGOING`` if any legal move exists; otherwise
            checkmate when ``side_to_move`` is in check, else stalemate.
    """
    if has_legal_move(side_to_move, board, last_move):
        return ONGOING
    if king_in_check(side_to_move, board) is not None:
        return TerminalState(GameStatus.CHECKMATE, winner=just_moved)
    return TerminalState(GameStatus.STALEMATE)
