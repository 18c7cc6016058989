from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


STARTPOS_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

FILES = "abcdefgh"


class Color(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def fen(self) -> str:
        return "w" if self is Color.WHITE else "b"


class PieceType(str, Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


PIECE_TO_CHAR = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
CHAR_TO_PIECE = {v: k for k, v in PIECE_TO_CHAR.items()}


@dataclass(frozen=True)
class Piece:
    """Immutable piece value. Promotion replaces the piece instead of mutating it."""

    piece_type: PieceType
    color: Color

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Build a piece from a FEN letter (uppercase white, lowercase black).

        Raises:
            ValueError: If ``ch`` is not a FEN piece letter.
        """
        ptype = CHAR_TO_PIECE.get(ch.lower())
        if ptype is None or len(ch) != 1:
            raise ValueError(f"invalid piece in FEN: {ch!r}")
        return cls(ptype, Color.WHITE if ch.isupper() else Color.BLACK)

    def to_char(self) -> str:
        ch = PIECE_TO_CHAR[self.piece_type]
        return ch.upper() if self.color is Color.WHITE else ch


@dataclass(frozen=True)
class Square:
    """Board coordinate; row 0 is rank 8, column 0 is file a."""

    row: int
    col: int

    @property
    def on_board(self) -> bool:
        return 0 <= self.row <= 7 and 0 <= self.col <= 7

    @property
    def name(self) -> str:
        if not self.on_board:
            raise ValueError(f"square off board: ({self.row}, {self.col})")
        return FILES[self.col] + str(8 - self.row)

    def offset(self, d_row: int, d_col: int) -> "Square":
        return Square(self.row + d_row, self.col + d_col)

    @classmethod
    def parse(cls, s: str) -> "Square":
        """Convert algebraic notation (``"e2"``) into a square.

        Raises:
            ValueError: If ``s`` is not a valid square name.
        """
        if len(s) != 2 or s[0] not in FILES or s[1] < "1" or s[1] > "8":
            raise ValueError(f"invalid square: {s!r}")
        return cls(8 - int(s[1]), FILES.index(s[0]))

    def __str__(self) -> str:
        return self.name


Grid = Tuple[Tuple[Optional[Piece], ...], ...]

_EMPTY_ROW: Tuple[Optional[Piece], ...] = (None,) * 8


class Board:
    """Immutable 8x8 grid of optional pieces.

    Every mutating-looking operation returns a new ``Board``; callers own the
    canonical board and the engine only ever reads the one it is handed.
    """

    __slots__ = ("_rows",)

    def __init__(self, rows: Optional[Grid] = None) -> None:
        if rows is None:
            rows = (_EMPTY_ROW,) * 8
        if len(rows) != 8 or any(len(r) != 8 for r in rows):
            raise ValueError("board must be 8x8")
        self._rows: Grid = tuple(tuple(r) for r in rows)

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def initial(cls) -> "Board":
        """Create a board in the standard chess starting position."""
        return cls.from_fen(STARTPOS_PLACEMENT)

    @classmethod
    def from_fen(cls, fen: str) -> "Board":
        """Create a board from a FEN piece-placement field.

        A full FEN string is accepted as well; only its first field is read.

        Args:
            fen (str): Placement such as ``"4k3/8/8/8/8/8/8/4K3"``.

        Returns:
            Board: Board with the described pieces.

        Raises:
            ValueError: If the placement has the wrong number of ranks, an
                invalid piece letter, or a rank that does not sum to 8 squares.
        """
        if not isinstance(fen, str) or not fen.strip():
            raise ValueError("FEN must be a non-empty string")
        placement = fen.split()[0]
        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        rows: List[Tuple[Optional[Piece], ...]] = []
        # FEN lists rank 8 first, which is row 0.
        for rank in ranks:
            row: List[Optional[Piece]] = []
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    row.extend([None] * n)
                else:
                    row.append(Piece.from_char(ch))
                if len(row) > 8:
                    raise ValueError("too many squares in FEN rank")
            if len(row) != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")
            rows.append(tuple(row))
        return cls(tuple(rows))

    def to_fen(self) -> str:
        """Serialize the piece placement into a FEN placement field."""
        ranks: List[str] = []
        for row in self._rows:
            run = 0
            out = []
            for piece in row:
                if piece is None:
                    run += 1
                    continue
                if run:
                    out.append(str(run))
                    run = 0
                out.append(piece.to_char())
            if run:
                out.append(str(run))
            ranks.append("".join(out))
        return "/".join(ranks)

    def __getitem__(self, sq: Square) -> Optional[Piece]:
        if not sq.on_board:
            return None
        return self._rows[sq.row][sq.col]

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    def place(self, sq: Square, piece: Optional[Piece]) -> "Board":
        """Return a copy with ``piece`` (or nothing) on ``sq``."""
        return self.edit({sq: piece})

    def edit(self, changes: "dict[Square, Optional[Piece]]") -> "Board":
        """Return a copy with several squares replaced at once.

        Rows are copied shallowly; untouched rows are shared with ``self``.
        """
        rows = list(self._rows)
        for sq, piece in changes.items():
            if not sq.on_board:
                raise ValueError(f"square off board: ({sq.row}, {sq.col})")
            row = list(rows[sq.row])
            row[sq.col] = piece
            rows[sq.row] = tuple(row)
        return Board(tuple(rows))

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[Square, Piece]]:
        """Yield ``(square, piece)`` pairs in row-major order."""
        for r, row in enumerate(self._rows):
            for c, piece in enumerate(row):
                if piece is not None and (color is None or piece.color is color):
                    yield Square(r, c), piece

    def find_king(self, color: Color) -> Optional[Square]:
        for sq, piece in self.pieces(color):
            if piece.piece_type is PieceType.KING:
                return sq
        return None

    @property
    def rows(self) -> Grid:
        return self._rows

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"Board({self.to_fen()!r})"
