"""Move generation, attack detection and move application.

Two tiers keep "is this square attacked" and "is this move legal" from
recursing into each other: pseudo-legal generation feeds ``is_attacked``, and
``is_attacked`` feeds the king-safety filter in ``legal_moves`` only.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .board import Board, Color, Piece, PieceType, Square
from .move import Move, MoveKind


KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (1, 2), (1, -2), (-1, 2), (-1, -2),
    (2, 1), (2, -1), (-2, 1), (-2, -1),
)
KING_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (0, 1), (0, -1), (1, 0), (-1, 0),
    (1, 1), (1, -1), (-1, 1), (-1, -1),
)
ROOK_DIRS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
BISHOP_DIRS: Tuple[Tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
QUEEN_DIRS: Tuple[Tuple[int, int], ...] = ROOK_DIRS + BISHOP_DIRS

SLIDER_DIRS = {
    PieceType.ROOK: ROOK_DIRS,
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}


def pawn_direction(color: Color) -> int:
    return -1 if color is Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return 6 if color is Color.WHITE else 1


def promotion_row(color: Color) -> int:
    return 0 if color is Color.WHITE else 7


# --- Pseudo-legal generation ---

def pseudo_legal_moves(
    piece: Piece, from_sq: Square, board: Board, last_move: Optional[Move]
) -> List[Square]:
    """Return destinations obeying the piece's movement rules only.

    The result may leave the mover's own king attacked.
    """
    if piece.piece_type is PieceType.PAWN:
        return _pawn_moves(piece, from_sq, board, last_move)
    if piece.piece_type is PieceType.KNIGHT:
        return _step_moves(piece, from_sq, board, KNIGHT_OFFSETS)
    if piece.piece_type is PieceType.KING:
        return _step_moves(piece, from_sq, board, KING_OFFSETS)
    return _sliding_moves(piece, from_sq, board, SLIDER_DIRS[piece.piece_type])


def _pawn_moves(
    piece: Piece, from_sq: Square, board: Board, last_move: Optional[Move]
) -> List[Square]:
    moves: List[Square] = []
    direction = pawn_direction(piece.color)

    one = from_sq.offset(direction, 0)
    if one.on_board and board.is_empty(one):
        moves.append(one)
        two = from_sq.offset(2 * direction, 0)
        if from_sq.row == pawn_start_row(piece.color) and board.is_empty(two):
            moves.append(two)

    for d_col in (-1, 1):
        target = from_sq.offset(direction, d_col)
        if not target.on_board:
            continue
        occupant = board[target]
        if occupant is not None:
            if occupant.color is not piece.color:
                moves.append(target)
        elif _en_passant_victim(piece, from_sq, target, board, last_move) is not None:
            moves.append(target)
    return moves


def _en_passant_victim(
    piece: Piece,
    from_sq: Square,
    to_sq: Square,
    board: Board,
    last_move: Optional[Move],
) -> Optional[Square]:
    """Square of the pawn captured en passant by ``from_sq -> to_sq``, if any.

    Eligible only right after an opposite-colour pawn advanced two squares and
    landed beside ``from_sq`` on the target file.
    """
    if last_move is None or piece.piece_type is not PieceType.PAWN:
        return None
    if not board.is_empty(to_sq) or to_sq.row != from_sq.row + pawn_direction(piece.color):
        return None
    landed = last_move.to_sq
    moved = board[landed]
    if (
        moved is not None
        and moved.piece_type is PieceType.PAWN
        and moved.color is not piece.color
        and abs(last_move.from_sq.row - landed.row) == 2
        and last_move.from_sq.col == landed.col
        and landed.row == from_sq.row
        and landed.col == to_sq.col
    ):
        return landed
    return None


def _step_moves(
    piece: Piece,
    from_sq: Square,
    board: Board,
    offsets: Tuple[Tuple[int, int], ...],
) -> List[Square]:
    moves: List[Square] = []
    for d_row, d_col in offsets:
        to = from_sq.offset(d_row, d_col)
        if not to.on_board:
            continue
        occupant = board[to]
        if occupant is None or occupant.color is not piece.color:
            moves.append(to)
    return moves


def _sliding_moves(
    piece: Piece,
    from_sq: Square,
    board: Board,
    directions: Tuple[Tuple[int, int], ...],
) -> List[Square]:
    moves: List[Square] = []
    for d_row, d_col in directions:
        to = from_sq.offset(d_row, d_col)
        while to.on_board:
            occupant = board[to]
            if occupant is not None:
                if occupant.color is not piece.color:
                    moves.append(to)
                break
            moves.append(to)
            to = to.offset(d_row, d_col)
    return moves


# --- Attack and check detection ---

def is_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """Return True if any ``by_color`` piece has ``square`` among its pseudo-legal destinations."""
    for from_sq, piece in board.pieces(by_color):
        # No last move: en passant never lands on an occupied square.
        if square in pseudo_legal_moves(piece, from_sq, board, None):
            return True
    return False


def king_in_check(color: Color, board: Board) -> Optional[Square]:
    """Return the king square of ``color`` if it is attacked, else None.

    A missing king is treated as not in check.
    """
    king_sq = board.find_king(color)
    if king_sq is None:
        return None
    if is_attacked(king_sq, color.opposite, board):
        return king_sq
    return None


# --- Classification and application ---

def classify_move(
    board: Board, from_sq: Square, to_sq: Square, last_move: Optional[Move]
) -> MoveKind:
    """Classify ``from_sq -> to_sq`` against ``board``; assumes the move is pseudo-legal."""
    piece = board[from_sq]
    if piece is None:
        return MoveKind.NORMAL
    kind = MoveKind.NORMAL
    target = board[to_sq]
    if target is not None and target.color is not piece.color:
        kind |= MoveKind.CAPTURE
    if piece.piece_type is PieceType.PAWN:
        if target is None and from_sq.col != to_sq.col:
            if _en_passant_victim(piece, from_sq, to_sq, board, last_move) is not None:
                kind |= MoveKind.CAPTURE | MoveKind.EN_PASSANT
        if abs(to_sq.row - from_sq.row) == 2:
            kind |= MoveKind.DOUBLE_PUSH
        if to_sq.row == promotion_row(piece.color):
            kind |= MoveKind.PROMOTION
    return kind


def apply_move(board: Board, move: Move) -> Board:
    """Return a new board with ``move`` applied.

    Handles the side effects the destination alone does not express: the
    pawn captured en passant is removed, and a pawn reaching the far rank
    becomes a queen of its colour whatever stood on that square.

    Raises:
        ValueError: If ``move.from_sq`` is empty.
    """
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError("no piece to move from from_sq")
    placed = piece
    if piece.piece_type is PieceType.PAWN and move.to_sq.row == promotion_row(piece.color):
        placed = Piece(PieceType.QUEEN, piece.color)
    changes = {move.from_sq: None, move.to_sq: placed}
    if move.is_en_passant:
        changes[Square(move.from_sq.row, move.to_sq.col)] = None
    return board.edit(changes)


# --- Legal generation ---

def legal_moves(
    piece: Optional[Piece],
    from_sq: Square,
    board: Board,
    last_move: Optional[Move],
) -> List[Square]:
    """Return the destinations ``piece`` may reach without exposing its king.

    Each pseudo-legal destination is tried on a scratch copy of ``board``;
    ``board`` itself is never mutated.

    Args:
        piece (Optional[Piece]): Piece to move; ``None`` yields no moves.
        from_sq (Square): Square the piece stands on.
        board (Board): Position to evaluate.
        last_move (Optional[Move]): Previous move, for en-passant eligibility.

    Returns:
        List[Square]: Legal destinations, empty if there are none or the
            input is malformed.
    """
    if piece is None or not from_sq.on_board:
        return []
    legal: List[Square] = []
    scratch = board if board[from_sq] == piece else board.place(from_sq, piece)
    for to in pseudo_legal_moves(piece, from_sq, board, last_move):
        kind = MoveKind.NORMAL
        if _en_passant_victim(piece, from_sq, to, board, last_move) is not None:
            kind = MoveKind.CAPTURE | MoveKind.EN_PASSANT
        after = apply_move(scratch, Move(from_sq, to, kind))
        if king_in_check(piece.color, after) is None:
            legal.append(to)
    return legal


def all_legal_moves(color: Color, board: Board, last_move: Optional[Move]) -> List[Move]:
    """Every legal move of ``color`` as classified ``Move`` values."""
    moves: List[Move] = []
    for from_sq, piece in board.pieces(color):
        for to in legal_moves(piece, from_sq, board, last_move):
            moves.append(Move(from_sq, to, classify_move(board, from_sq, to, last_move)))
    return moves


def has_legal_move(color: Color, board: Board, last_move: Optional[Move]) -> bool:
    for from_sq, piece in board.pieces(color):
        if legal_moves(piece, from_sq, board, last_move):
            return True
    return False
