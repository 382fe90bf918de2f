from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import (
    chess_error_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.board import Board
from ...engine.coords import Position
from ...engine.errors import ChessError
from ...engine.rules import move_troop


logger = logging.getLogger(__name__)


class PositionModel(BaseModel):
    file: str = Field(..., description="File token, 'A'..'H'")
    rank: str = Field(..., description="Rank token, 'One'..'Eight'")

    def to_position(self) -> Position:
        return Position.from_dict(self.model_dump())


class MoveRequest(BaseModel):
    start: PositionModel
    end: PositionModel
    board: Dict[str, Any] = Field(..., description="Serialized board")


class BoardRequest(BaseModel):
    board: Dict[str, Any] = Field(..., description="Serialized board")


class RenderResponse(BaseModel):
    text: str


def create_app(log_level: int | str = logging.INFO) -> FastAPI:
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    logging.basicConfig(level=log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ChessError, chess_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/new-board")
    async def new_board() -> Dict[str, Any]:
        return Board.default().to_dict()

    @app.post("/move")
    async def make_move(req: MoveRequest) -> Dict[str, Any]:
        # Each request works on its own deserialized board
        board = Board.from_dict(req.board)
        start, end = req.start.to_position(), req.end.to_position()
        move_troop(board, start, end)
        logger.info("move applied", extra={"start": str(start), "end": str(end)})
        return board.to_dict()

    @app.post("/render", response_model=RenderResponse)
    async def render(req: BoardRequest) -> RenderResponse:
        return RenderResponse(text=Board.from_dict(req.board).render())

    @app.post("/reset")
    async def reset(req: Optional[BoardRequest] = None) -> Dict[str, Any]:
        board = Board.from_dict(req.board) if req is not None else Board.default()
        board.reset()
        return board.to_dict()

    return app


# Default app for non-factory servers
app = create_app()
