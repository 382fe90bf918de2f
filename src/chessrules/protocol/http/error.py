from __future__ import annotations

import logging
from typing import Any, Dict, cast

from fastapi import Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse
from starlette import status
from fastapi.exceptions import RequestValidationError

from ...engine.errors import ChessError, InvalidPath, MoveError, ParseError


logger = logging.getLogger(__name__)


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    field_errors: list[dict[str, str]] | None = None,
    reason: str | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }
    if field_errors:
        payload["error"]["field_errors"] = field_errors
    if reason is not None:
        payload["error"]["reason"] = reason
    return payload


def _chess_error_code(exc: ChessError) -> str:
    # e.g. NotYourTurn -> "not_your_turn"
    name = type(exc).__name__
    if name.endswith("Error"):
        name = name[: -len("Error")]
    return "".join("_" + c.lower() if c.isupper() else c for c in name).lstrip("_")


async def chess_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render rejected moves and unparseable boards as 400 client errors."""
    request_id = getattr(request.state, "request_id", "")
    err = cast(ChessError, exc)
    if isinstance(err, MoveError):
        logger.info(
            "move rejected",
            extra={"request_id": request_id, "error": type(err).__name__},
        )
    elif isinstance(err, ParseError):
        logger.info("bad coordinate", extra={"request_id": request_id})
    payload = error_envelope(
        code=_chess_error_code(err),
        message=err.message,
        err_type="client_error",
        request_id=request_id,
        reason=err.reason if isinstance(err, InvalidPath) else None,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    if isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code
        payload = error_envelope(
            code=_status_to_code(status_code),
            message=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
            err_type="client_error" if 400 <= status_code < 500 else "server_error",
            request_id=request_id,
        )
        return JSONResponse(status_code=status_code, content=payload)
    return await exception_handler(request, exc)


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    if isinstance(exc, StarletteHTTPException):
        return await http_exception_handler(request, exc)
    # Invariant faults and unimplemented state transitions end up here
    logger.exception("Unhandled exception", extra={"request_id": request_id})
    payload = error_envelope(
        code="internal_error",
        message="Internal Server Error",
        err_type="server_error",
        request_id=request_id,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def request_validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    errors = []
    rve = cast(RequestValidationError, exc)
    for e in rve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []) if p is not None)
        errors.append(
            {
                "field": loc,
                "code": e.get("type", "value_error"),
                "message": e.get("msg", "invalid value"),
            }
        )
    payload = error_envelope(
        code="unprocessable_entity",
        message="Validation error",
        err_type="client_error",
        request_id=request_id,
        field_errors=errors or None,
    )
    return JSONResponse(status_code=422, content=payload)


def _status_to_code(status_code: int) -> str:
    codes = {
        status.HTTP_400_BAD_REQUEST: "bad_request",
        status.HTTP_404_NOT_FOUND: "not_found",
        status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
        422: "unprocessable_entity",
    }
    if status_code in codes:
        return codes[status_code]
    if 500 <= status_code < 600:
        return "internal_error"
    return "error"
