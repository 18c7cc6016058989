from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag

from .board import Piece, PieceType, Square


class MoveKind(IntFlag):
    """What a move does besides relocating the piece.

    En passant is ``CAPTURE | EN_PASSANT``; a capturing promotion is
    ``CAPTURE | PROMOTION``.
    """

    NORMAL = 0
    CAPTURE = 1
    EN_PASSANT = 2
    PROMOTION = 4
    DOUBLE_PUSH = 8


@dataclass(frozen=True)
class Move:
    """Engine move representation.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
        kind (MoveKind): Classification computed against the board the move
            was generated on. Not part of equality.
    """

    from_sq: Square
    to_sq: Square
    kind: MoveKind = field(default=MoveKind.NORMAL, compare=False)

    @property
    def is_capture(self) -> bool:
        return bool(self.kind & MoveKind.CAPTURE)

    @property
    def is_en_passant(self) -> bool:
        return bool(self.kind & MoveKind.EN_PASSANT)

    @property
    def is_promotion(self) -> bool:
        return bool(self.kind & MoveKind.PROMOTION)

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form.

        Returns:
            str: Move encoded like ``"e2e4"``.
        """
        return self.from_sq.name + self.to_sq.name


def parse_move(uci: str) -> Move:
    """Parse a long algebraic move string.

    Promotion is always to a queen, so a trailing ``q`` is tolerated.

    Args:
        uci (str): Move such as ``"e2e4"`` or ``"e7e8q"``.

    Returns:
        Move: Parsed move with ``MoveKind.NORMAL``; callers classify it against
            a board.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid move length: {uci!r}")
    if len(uci) == 5 and uci[4].lower() != "q":
        raise ValueError(f"invalid promotion piece: {uci[4]!r}")
    return Move(Square.parse(uci[0:2]), Square.parse(uci[2:4]))


def describe_move(piece: Piece, move: Move) -> str:
    """Render a move for the game history, e.g. ``"Ng1-f3"`` or ``"e4xd5"``."""
    letter = "" if piece.piece_type is PieceType.PAWN else piece.to_char().upper()
    sep = "x" if move.is_capture else "-"
    return f"{letter}{move.from_sq.name}{sep}{move.to_sq.name}"
