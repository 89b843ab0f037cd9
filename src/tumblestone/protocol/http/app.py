from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    parse_error_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ... import __version__
from ...config import Settings, get_settings
from ...engine.point import parse_point
from ...engine.puzzle import Puzzle
from ...engine.render import render
from ...engine.tsb import ParseError, format_tsb, grid_rows


logger = logging.getLogger(__name__)


class CreatePuzzleRequest(BaseModel):
    tsb: str = Field(..., min_length=1, description="Board in TSB text format")


class CreatePuzzleResponse(BaseModel):
    puzzle_id: str
    tsb: str


class MoveRequest(BaseModel):
    move: str = Field(..., description="Point as 'x,y', e.g. 0,3")


class SolveResponse(BaseModel):
    solvable: bool
    moves: List[str]
    nodes: int
    time_ms: int


class PuzzleState(BaseModel):
    puzzle_id: str
    turn: int
    width: int
    height: int
    rows: List[str]
    wild_colors: str
    lock: bool
    removable: int
    solved: bool
    legal_moves: List[str]
    move_history: List[str]
    plan: Optional[List[str]]
    next_hint: Optional[str]
    frame: str


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Tumblestone Solver API", version=__version__)

    logging.basicConfig(level=settings.log_level.upper())

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ParseError, parse_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/puzzles")
    async def list_puzzles() -> Dict[str, List[str]]:
        return {"puzzle_ids": store.ids()}

    @app.post("/api/puzzles", response_model=CreatePuzzleResponse)
    async def create_puzzle(req: CreatePuzzleRequest) -> CreatePuzzleResponse:
        # ParseError propagates to its handler as a 400
        puzzle = Puzzle.from_tsb(req.tsb)
        puzzle_id = store.create(puzzle)
        logger.info("puzzle created", extra={"puzzle_id": puzzle_id})
        return CreatePuzzleResponse(puzzle_id=puzzle_id, tsb=format_tsb(puzzle.board))

    @app.get("/api/puzzles/{puzzle_id}/state", response_model=PuzzleState)
    async def get_state(puzzle_id: str) -> PuzzleState:
        return _state(puzzle_id, _require_puzzle(store, puzzle_id))

    @app.delete("/api/puzzles/{puzzle_id}")
    async def delete_puzzle(puzzle_id: str) -> Dict[str, bool]:
        if not store.delete(puzzle_id):
            raise HTTPException(status_code=404, detail="puzzle not found")
        return {"deleted": True}

    @app.post("/api/puzzles/{puzzle_id}/move", response_model=PuzzleState)
    async def make_move(puzzle_id: str, req: MoveRequest) -> PuzzleState:
        puzzle = _require_puzzle(store, puzzle_id)
        try:
            point = parse_point(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            puzzle.play(point)
        except ValueError:
            raise HTTPException(status_code=400, detail="illegal move")
        return _state(puzzle_id, puzzle)

    @app.post("/api/puzzles/{puzzle_id}/undo", response_model=PuzzleState)
    async def undo(puzzle_id: str) -> PuzzleState:
        puzzle = _require_puzzle(store, puzzle_id)
        try:
            puzzle.undo()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(puzzle_id, puzzle)

    @app.post("/api/puzzles/{puzzle_id}/solve", response_model=SolveResponse)
    async def solve(puzzle_id: str) -> SolveResponse:
        puzzle = _require_puzzle(store, puzzle_id)
        res = puzzle.solve()
        return SolveResponse(
            solvable=res.solvable,
            moves=[m.to_str() for m in res.moves or []],
            nodes=res.nodes,
            time_ms=res.time_ms,
        )

    @app.post("/api/puzzles/{puzzle_id}/step", response_model=PuzzleState)
    async def step(puzzle_id: str) -> PuzzleState:
        puzzle = _require_puzzle(store, puzzle_id)
        try:
            puzzle.step()
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return _state(puzzle_id, puzzle)

    return app


def _require_puzzle(store: InMemorySessionStore, puzzle_id: str) -> Puzzle:
    puzzle = store.get(puzzle_id)
    if puzzle is None:
        raise HTTPException(status_code=404, detail="puzzle not found")
    return puzzle


def _state(puzzle_id: str, puzzle: Puzzle) -> PuzzleState:
    board = puzzle.board
    rows = grid_rows(board)
    nxt = puzzle.next_planned()
    return PuzzleState(
        puzzle_id=puzzle_id,
        turn=board.turn,
        width=board.width,
        height=board.height,
        rows=rows,
        wild_colors=board.wild_glyphs(),
        lock=board.lock,
        removable=board.removable_stones(),
        solved=puzzle.solved(),
        legal_moves=[p.to_str() for p in puzzle.legal_moves()],
        move_history=puzzle.move_history(),
        plan=[p.to_str() for p in puzzle.plan] if puzzle.plan is not None else None,
        next_hint=nxt.to_str() if nxt is not None else None,
        frame=render(board, nxt, color=False),
    )
