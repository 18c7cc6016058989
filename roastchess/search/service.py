from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from roastchess.engine.board import Board, Piece, PieceType
from roastchess.engine.move import Move
from roastchess.engine.movegen import apply_move
from roastchess.eval import PIECE_VALUES, material_score, piece_value


logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    NOOB = "noob"
    MEDIUM = "medium"
    HARD = "hard"
    EXTREME = "extreme"


class NoCandidateMovesError(ValueError):
    """Raised when a move is requested from an empty candidate list."""


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: int


def captured_value(move: Move, board: Board) -> int:
    """Value of the piece ``move`` takes on ``board`` (0 for quiet moves).

    An en-passant capture lands on an empty square but still takes a pawn.
    """
    if move.is_en_passant:
        return PIECE_VALUES[PieceType.PAWN]
    mover = board[move.from_sq]
    target = board[move.to_sq]
    if target is None or (mover is not None and target.color is mover.color):
        return 0
    return piece_value(target)


def is_capture(move: Move, board: Board) -> bool:
    if move.is_en_passant:
        return True
    mover = board[move.from_sq]
    target = board[move.to_sq]
    return target is not None and (mover is None or target.color is not mover.color)


class MoveSelector:
    """Difficulty-tiered move picker for the automated opponent and hints.

    All ties are broken uniformly at random using ``rng``; pass a seeded
    ``random.Random`` for reproducible choices.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def select_move(
        self, candidates: Sequence[Move], difficulty: Difficulty, board: Board
    ) -> Move:
        """Pick one of ``candidates`` according to ``difficulty``.

        Args:
            candidates (Sequence[Move]): Legal moves of the side to move.
            difficulty (Difficulty): Policy tier.
            board (Board): Position the candidates were generated on.

        Returns:
            Move: The chosen move.

        Raises:
            NoCandidateMovesError: If ``candidates`` is empty; the caller
                should only ask while the game is ongoing.
        """
        if not candidates:
            raise NoCandidateMovesError("no candidate moves to choose from")
        difficulty = Difficulty(difficulty)

        if difficulty is Difficulty.NOOB:
            pool = list(candidates)
        elif difficulty is Difficulty.MEDIUM:
            # Any capture will do; the captured value is ignored on purpose.
            pool = [m for m in candidates if is_capture(m, board)] or list(candidates)
        else:
            pool = _best(self.scored_candidates(candidates, difficulty, board))

        choice = self._rng.choice(pool)
        logger.debug(
            "bot move",
            extra={"difficulty": difficulty.value, "move": choice.to_uci(), "pool": len(pool)},
        )
        return choice

    def scored_candidates(
        self, candidates: Sequence[Move], difficulty: Difficulty, board: Board
    ) -> List[ScoredMove]:
        """Score each candidate with the metric used by ``hard`` or ``extreme``.

        ``hard`` scores the immediately captured value; ``extreme`` scores the
        material balance after the move from the mover's perspective.
        """
        difficulty = Difficulty(difficulty)
        if difficulty not in (Difficulty.HARD, Difficulty.EXTREME):
            raise ValueError(f"{difficulty.value} does not rank moves")
        scored: List[ScoredMove] = []
        for move in candidates:
            if difficulty is Difficulty.HARD:
                score = captured_value(move, board)
            else:
                mover = board[move.from_sq]
                score = _one_ply_material(board, move, mover)
            scored.append(ScoredMove(move, score))
        return scored

    def suggest_hint(self, candidates: Sequence[Move], board: Board) -> Optional[Move]:
        """Suggest a move: any capture if one exists, otherwise any move."""
        if not candidates:
            return None
        captures = [m for m in candidates if is_capture(m, board)]
        choice = self._rng.choice(captures or list(candidates))
        logger.debug("hint", extra={"move": choice.to_uci(), "captures": len(captures)})
        return choice


def _one_ply_material(board: Board, move: Move, mover: Optional[Piece]) -> int:
    if mover is None:
        raise ValueError(f"no piece on {move.from_sq.name}")
    return material_score(apply_move(board, move), mover.color)


def _best(scored: List[ScoredMove]) -> List[Move]:
    top = max(s.score for s in scored)
    return [s.move for s in scored if s.score == top]


_default_selector = MoveSelector()


def select_move(candidates: Sequence[Move], difficulty: Difficulty, board: Board) -> Move:
    return _default_selector.select_move(candidates, difficulty, board)


def suggest_hint(candidates: Sequence[Move], board: Board) -> Optional[Move]:
    return _default_selector.suggest_hint(candidates, board)
