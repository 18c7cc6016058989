from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from roastchess.eval import material_score
from roastchess.search.service import Difficulty, MoveSelector

from .board import Board, Color, PieceType, Square
from .move import Move, MoveKind, describe_move
from .movegen import (
    all_legal_moves,
    apply_move,
    classify_move,
    king_in_check,
    legal_moves,
    pawn_direction,
)
from .rules import ONGOING, GameStatus, TerminalState, terminal_state


logger = logging.getLogger(__name__)

DEFAULT_HINTS = 3
BOT_COLOR = Color.BLACK


class GameMode(str, Enum):
    PVP = "pvp"
    PVE = "pve"


class IllegalMoveError(ValueError):
    """Raised for moves the side to move may not play."""


class GameOverError(Exception):
    """Raised when a move or hint is requested after the game has ended."""


class NoHintsLeftError(Exception):
    """Raised when the side to move has used up its hint allowance."""


@dataclass
class Game:
    """Game session wrapper around an immutable board.

    Responsibility: track whose turn it is, the last move (for en passant),
    the move history and hint allowances; apply validated moves and evaluate
    the terminal state once after each of them.
    """

    board: Board
    turn: Color = Color.WHITE
    last_move: Optional[Move] = None
    mode: GameMode = GameMode.PVP
    difficulty: Difficulty = Difficulty.MEDIUM
    history: List[Move] = field(default_factory=list)
    notation: List[str] = field(default_factory=list)
    hints: Dict[Color, int] = field(default_factory=dict)
    state: TerminalState = ONGOING
    fullmove_number: int = 1

    @classmethod
    def new(
        cls,
        mode: GameMode = GameMode.PVP,
        difficulty: Difficulty = Difficulty.MEDIUM,
        hint_allowance: int = DEFAULT_HINTS,
    ) -> "Game":
        return cls(
            board=Board.initial(),
            mode=GameMode(mode),
            difficulty=Difficulty(difficulty),
            hints={Color.WHITE: hint_allowance, Color.BLACK: hint_allowance},
        )

    @classmethod
    def from_fen(
        cls,
        fen: str,
        mode: GameMode = GameMode.PVP,
        difficulty: Difficulty = Difficulty.MEDIUM,
        hint_allowance: int = DEFAULT_HINTS,
    ) -> "Game":
        """Create a game from a FEN string.

        Placement, side to move and the en-passant target are honoured; the
        target is turned into the double pawn push that produced it. Castling
        rights and clocks are accepted and ignored. A bare placement field
        means white to move.

        Raises:
            ValueError: If any field is malformed or the en-passant target is
                not backed by a pawn that just advanced two squares.
        """
        if not isinstance(fen, str) or not fen.strip():
            raise ValueError("FEN must be a non-empty string")
        parts = fen.split()
        board = Board.from_fen(parts[0])
        stm = parts[1] if len(parts) > 1 else "w"
        if stm not in ("w", "b"):
            raise ValueError("side to move must be 'w' or 'b'")
        turn = Color.WHITE if stm == "w" else Color.BLACK

        castling = parts[2] if len(parts) > 2 else "-"
        if castling != "-" and any(ch not in "KQkq" for ch in castling):
            raise ValueError("invalid castling rights")

        last_move: Optional[Move] = None
        if len(parts) > 3 and parts[3] != "-":
            try:
                target = Square.parse(parts[3])
            except ValueError as e:
                raise ValueError("invalid en passant square") from e
            last_move = _double_push_through(board, target, turn.opposite)

        fullmove = 1
        if len(parts) > 5:
            try:
                fullmove = int(parts[5])
            except ValueError as e:
                raise ValueError("invalid fullmove number") from e

        game = cls(
            board=board,
            turn=turn,
            last_move=last_move,
            mode=GameMode(mode),
            difficulty=Difficulty(difficulty),
            hints={Color.WHITE: hint_allowance, Color.BLACK: hint_allowance},
            fullmove_number=fullmove,
        )
        game.state = terminal_state(board, turn, last_move, turn.opposite)
        return game

    def to_fen(self) -> str:
        ep = "-"
        lm = self.last_move
        if lm is not None and abs(lm.from_sq.row - lm.to_sq.row) == 2:
            moved = self.board[lm.to_sq]
            if moved is not None and moved.piece_type is PieceType.PAWN:
                ep = Square((lm.from_sq.row + lm.to_sq.row) // 2, lm.to_sq.col).name
        return f"{self.board.to_fen()} {self.turn.fen} - {ep} 0 {self.fullmove_number}"

    # --- Queries ---

    def legal_moves(self) -> List[Move]:
        return all_legal_moves(self.turn, self.board, self.last_move)

    def legal_destinations(self, square: Square) -> List[Square]:
        """Legal destinations of the piece on ``square`` (any colour)."""
        return legal_moves(self.board[square], square, self.board, self.last_move)

    def checked_king(self) -> Optional[Square]:
        return king_in_check(self.turn, self.board)

    def in_check(self) -> bool:
        return self.checked_king() is not None

    @property
    def is_over(self) -> bool:
        return self.state.is_over

    @property
    def winner(self) -> Optional[str]:
        if self.state.status is GameStatus.CHECKMATE and self.state.winner is not None:
            return self.state.winner.value
        if self.state.status is GameStatus.STALEMATE:
            return "draw"
        return None

    def is_bot_turn(self) -> bool:
        return self.mode is GameMode.PVE and self.turn is BOT_COLOR

    def material(self, perspective: Color) -> int:
        return material_score(self.board, perspective)

    # --- Mutations ---

    def apply_move(self, move: Move) -> Move:
        """Validate and play ``move`` for the side to move.

        Returns:
            Move: The move as played, with its ``MoveKind`` classified.

        Raises:
            GameOverError: If the game has already ended.
            IllegalMoveError: If there is no piece of the side to move on the
                origin square or the destination is not legal.
        """
        if self.is_over:
            raise GameOverError("game is over")
        piece = self.board[move.from_sq]
        if piece is None or piece.color is not self.turn:
            raise IllegalMoveError("no piece of the side to move on that square")
        if move.to_sq not in legal_moves(piece, move.from_sq, self.board, self.last_move):
            raise IllegalMoveError("illegal move")

        kind = classify_move(self.board, move.from_sq, move.to_sq, self.last_move)
        played = Move(move.from_sq, move.to_sq, kind)
        self.board = apply_move(self.board, played)
        self.last_move = played
        self.history.append(played)
        self.notation.append(describe_move(piece, played))

        just_moved = self.turn
        self.turn = just_moved.opposite
        if just_moved is Color.BLACK:
            self.fullmove_number += 1
        self.state = terminal_state(self.board, self.turn, self.last_move, just_moved)

        logger.info("move", extra={"move": self.notation[-1], "color": just_moved.value})
        if self.is_over:
            logger.info("game over", extra={"status": self.state.status.value, "winner": self.winner})
        return played

    def bot_move(self, selector: MoveSelector) -> Move:
        """Let the automated opponent pick and play a move.

        Raises:
            GameOverError: If the game has already ended.
            IllegalMoveError: If it is not the automated opponent's turn.
        """
        if self.is_over:
            raise GameOverError("game is over")
        if not self.is_bot_turn():
            raise IllegalMoveError("it is not the bot's turn")
        choice = selector.select_move(self.legal_moves(), self.difficulty, self.board)
        return self.apply_move(choice)

    def use_hint(self, selector: MoveSelector) -> Optional[Move]:
        """Suggest a move for the side to move, consuming one hint.

        Raises:
            GameOverError: If the game has already ended.
            NoHintsLeftError: If the side to move has no hints left.
        """
        if self.is_over:
            raise GameOverError("game is over")
        if self.hints.get(self.turn, 0) <= 0:
            raise NoHintsLeftError(f"{self.turn.value} has no hints left")
        hint = selector.suggest_hint(self.legal_moves(), self.board)
        if hint is not None:
            self.hints[self.turn] -= 1
        return hint

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.history]


def _double_push_through(board: Board, target: Square, mover: Color) -> Move:
    """Reconstruct the double pawn push by ``mover`` that passed over ``target``."""
    d = pawn_direction(mover)
    from_sq = target.offset(-d, 0)
    to_sq = target.offset(d, 0)
    pawn = board[to_sq]
    if (
        not from_sq.on_board
        or not to_sq.on_board
        or pawn is None
        or pawn.piece_type is not PieceType.PAWN
        or pawn.color is not mover
        or not board.is_empty(target)
        or not board.is_empty(from_sq)
    ):
        raise ValueError("invalid en passant square")
    return Move(from_sq, to_sq, MoveKind.DOUBLE_PUSH)
