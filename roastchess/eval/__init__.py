"""Evaluation heuristics.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from typing import Dict, Final, Optional

from roastchess.engine.board import Board, Color, Piece, PieceType


# Material values in pawns; the king has no finite material value.
P_VAL: Final = 1
N_VAL: Final = 3
B_VAL: Final = 3
R_VAL: Final = 5
Q_VAL: Final = 9

PIECE_VALUES: Final[Dict[PieceType, int]] = {
    PieceType.PAWN: P_VAL,
    PieceType.KNIGHT: N_VAL,
    PieceType.BISHOP: B_VAL,
    PieceType.ROOK: R_VAL,
    PieceType.QUEEN: Q_VAL,
    PieceType.KING: 0,
}


def piece_value(piece: Optional[Piece]) -> int:
    if piece is None:
        return 0
    return PIECE_VALUES[piece.piece_type]


def material(board: Board, color: Color) -> int:
    """Sum of piece values ``color`` has on the board."""
    return sum(PIECE_VALUES[p.piece_type] for _, p in board.pieces(color))


def material_score(board: Board, perspective: Color) -> int:
    """Return material balance from ``perspective``'s side.

    Positive when ``perspective`` is ahead. Antisymmetric:
    ``material_score(b, WHITE) == -material_score(b, BLACK)``.
    """
    return material(board, perspective) - material(board, perspective.opposite)
