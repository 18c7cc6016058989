from __future__ import annotations

from typing import Optional

from .board import Board, Color
from .move import Move
from .movegen import all_legal_moves, apply_move


def perft(board: Board, side: Color, last_move: Optional[Move], depth: int) -> int:
    """Compute perft node count for ``board`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Note: promotions only ever produce a queen and castling does not exist, so
    counts match published perft numbers only for positions where neither
    comes into play within ``depth`` plies.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = all_legal_moves(side, board, last_move)
    if depth == 1:
        return len(moves)
    nodes = 0
    for m in moves:
        nodes += perft(apply_move(board, m), side.opposite, m, depth - 1)
    return nodes
