from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    DOMAIN_ERRORS,
    domain_exception_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...config import ServerConfig
from ...engine.board import Color, STARTPOS_PLACEMENT, Square
from ...engine.game import Game, GameMode
from ...engine.move import parse_move
from ...engine.perft import perft as perft_nodes
from ...search.service import Difficulty, MoveSelector
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)

STARTPOS_FEN = f"{STARTPOS_PLACEMENT} w - - 0 1"


class CreateGameRequest(BaseModel):
    mode: GameMode = Field(default=GameMode.PVP, description="pvp or pve (bot plays black)")
    difficulty: Optional[Difficulty] = Field(default=None, description="Bot difficulty")
    fen: Optional[str] = Field(default=None, description="Optional starting FEN")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class MoveRequest(BaseModel):
    move: str = Field(..., description="Long algebraic move string, e.g., e2e4")


class PerftRequest(BaseModel):
    fen: str = Field(default=STARTPOS_FEN, description="FEN string")
    depth: int = Field(default=1, ge=0, le=4)


class HintResponse(BaseModel):
    move: Optional[str]
    hints_left: int


class DestinationsResponse(BaseModel):
    square: str
    destinations: List[str]


class GameState(BaseModel):
    game_id: str
    fen: str
    turn: str
    mode: str
    difficulty: str
    legal_moves: List[str]
    in_check: bool
    checked_king: Optional[str]
    status: str
    winner: Optional[str]
    last_move: Optional[str]
    move_history: List[str]
    hints: Dict[str, int]
    material: Dict[str, int]


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    config = config or ServerConfig()
    app = FastAPI(title="Roast Chess API", version="0.1.0")

    logging.basicConfig(level=config.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    # Preserve FastAPI 422 validation behavior and structured HTTP errors
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    for exc_type in DOMAIN_ERRORS:
        app.add_exception_handler(exc_type, domain_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    rng = random.Random(config.seed) if config.seed is not None else None
    selector = MoveSelector(rng)
    app.state.config = config
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        req = req or CreateGameRequest()
        difficulty = req.difficulty or config.default_difficulty
        try:
            if req.fen is None:
                game = Game.new(req.mode, difficulty, config.hint_allowance)
            else:
                game = Game.from_fen(req.fen, req.mode, difficulty, config.hint_allowance)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        game_id = store.create(game)
        logger.info(
            "game created",
            extra={"game_id": game_id, "mode": game.mode.value, "difficulty": game.difficulty.value},
        )
        if game.is_bot_turn() and not game.is_over:
            game.bot_move(selector)
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/moves/{square}", response_model=DestinationsResponse)
    async def get_destinations(game_id: str, square: str) -> DestinationsResponse:
        game = _require_game(store, game_id)
        try:
            sq = Square.parse(square)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return DestinationsResponse(
            square=sq.name,
            destinations=[to.name for to in game.legal_destinations(sq)],
        )

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            move = parse_move(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if game.is_bot_turn():
            raise HTTPException(status_code=400, detail="it is the bot's turn")
        game.apply_move(move)
        # In pve the bot answers within the same request.
        if game.is_bot_turn() and not game.is_over:
            game.bot_move(selector)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/bot-move", response_model=GameState)
    async def bot_move(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        game.bot_move(selector)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/hint", response_model=HintResponse)
    async def hint(game_id: str) -> HintResponse:
        game = _require_game(store, game_id)
        side = game.turn
        move = game.use_hint(selector)
        return HintResponse(
            move=move.to_uci() if move is not None else None,
            hints_left=game.hints[side],
        )

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        _require_game(store, game_id)
        store.delete(game_id)
        return {"status": "deleted"}

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        try:
            game = Game.from_fen(req.fen)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        nodes = perft_nodes(game.board, game.turn, game.last_move, req.depth)
        return {"nodes": nodes}

    return app


def _state(game_id: str, game: Game) -> GameState:
    checked = game.checked_king()
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        turn=game.turn.value,
        mode=game.mode.value,
        difficulty=game.difficulty.value,
        legal_moves=[] if game.is_over else [m.to_uci() for m in game.legal_moves()],
        in_check=checked is not None,
        checked_king=checked.name if checked is not None else None,
        status=game.state.status.value,
        winner=game.winner,
        last_move=game.last_move.to_uci() if game.last_move is not None else None,
        move_history=list(game.notation),
        hints={c.value: n for c, n in game.hints.items()},
        material={c.value: game.material(c) for c in Color},
    )


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


# Default app for non-factory servers
app = create_app()
