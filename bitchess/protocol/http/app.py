from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    chess_error_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...cli.render import render_compact
from ...config import Settings
from ...engine.errors import IllegalMoveError, InvalidPositionError
from ...engine.game import Game
from ...engine.move import describe_move
from ...engine.perft import divide as perft_divide
from ...engine.perft import perft as perft_nodes
from ...engine.policy import RandomPolicy
from ...engine.state import GameState


logger = logging.getLogger(__name__)

MAX_PERFT_DEPTH = 5


class CreateGameRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="FEN string (default: startpos)")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="UCI move string, e.g., e2e4")


class RandomMoveRequest(BaseModel):
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible pick")


class PerftRequest(BaseModel):
    fen: str = Field(..., description="FEN string")
    depth: int = Field(default=1, ge=0, le=MAX_PERFT_DEPTH)
    divide: bool = Field(default=False, description="Also return per-move counts")


class GameStateResponse(BaseModel):
    game_id: str
    fen: str
    side_to_move: str
    status: str
    legal_moves: list[str]
    in_check: bool
    checkmate: bool
    stalemate: bool
    draw: bool
    can_claim_draw: bool
    last_move: Optional[str]
    last_move_text: Optional[str]
    move_history: list[str]
    board: str


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    policy = settings.draw_policy()
    app = FastAPI(title="bitchess API", version="0.1.0")

    logging.basicConfig(level=settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(IllegalMoveError, chess_error_handler)
    app.add_exception_handler(InvalidPositionError, chess_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore(factory=lambda: Game.new(policy))
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        game = Game.from_fen(req.fen, policy) if req and req.fen else None
        game_id = store.create(game)
        game = _require_game(store, game_id)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
    async def get_state(game_id: str) -> GameStateResponse:
        return _state_response(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/position", response_model=GameStateResponse)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameStateResponse:
        _require_game(store, game_id)
        store.set(game_id, Game.from_fen(req.fen, policy))
        return _state_response(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/move", response_model=GameStateResponse)
    async def make_move(game_id: str, req: MoveRequest) -> GameStateResponse:
        game = _require_game(store, game_id)
        try:
            game.apply_uci(req.move)
        except IllegalMoveError:
            raise
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state_response(game_id, game)

    @app.post("/api/games/{game_id}/random-move", response_model=GameStateResponse)
    async def random_move(
        game_id: str, req: Optional[RandomMoveRequest] = None
    ) -> GameStateResponse:
        game = _require_game(store, game_id)
        moves = game.legal_moves()
        if not moves:
            raise HTTPException(status_code=409, detail=f"game is over ({game.status.value})")
        choose = RandomPolicy(random.Random(req.seed if req else None))
        game.apply_move(choose(moves))
        return _state_response(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameStateResponse)
    async def undo(game_id: str) -> GameStateResponse:
        game = _require_game(store, game_id)
        try:
            game.undo_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state_response(game_id, game)

    @app.post("/api/games/{game_id}/claim-draw", response_model=GameStateResponse)
    async def claim_draw(game_id: str) -> GameStateResponse:
        game = _require_game(store, game_id)
        try:
            game.claim_draw()
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return _state_response(game_id, game)

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    # Sync handler: runs in the threadpool.
    @app.post("/api/perft")
    def perft(req: PerftRequest) -> Dict[str, Any]:
        position = GameState.from_fen(req.fen)
        body: Dict[str, Any] = {"nodes": perft_nodes(position, req.depth)}
        if req.divide and req.depth >= 1:
            body["divide"] = perft_divide(position, req.depth)
        return body

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _state_response(game_id: str, game: Game) -> GameStateResponse:
    history = game.move_history()
    last = history[-1] if history else None
    return GameStateResponse(
        game_id=game_id,
        fen=game.to_fen(),
        side_to_move=game.state.side_to_move.to_fen(),
        status=game.status.value,
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        in_check=game.in_check(),
        checkmate=game.checkmate(),
        stalemate=game.stalemate(),
        draw=game.is_draw(),
        can_claim_draw=game.can_claim_draw(),
        last_move=last.to_uci() if last else None,
        last_move_text=describe_move(last) if last else None,
        move_history=[m.to_uci() for m in history],
        board=render_compact(game.state.board),
    )
