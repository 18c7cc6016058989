from __future__ import annotations

import logging
from typing import Any, Dict, Tuple, Type, cast

from fastapi import Request
from fastapi import HTTPException as FastAPIHTTPException
from fastapi.responses import JSONResponse
from starlette import status
from fastapi.exceptions import RequestValidationError

from ...engine.game import GameOverError, IllegalMoveError, NoHintsLeftError
from ...search.service import NoCandidateMovesError


logger = logging.getLogger(__name__)

# Engine exceptions that describe a client mistake rather than a server fault.
DOMAIN_ERRORS: Dict[Type[Exception], int] = {
    IllegalMoveError: status.HTTP_400_BAD_REQUEST,
    GameOverError: status.HTTP_409_CONFLICT,
    NoHintsLeftError: status.HTTP_409_CONFLICT,
    NoCandidateMovesError: status.HTTP_409_CONFLICT,
}

_STATUS_CODES: Dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "unprocessable_entity",
}


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    field_errors: list[dict[str, str]] | None = None,
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
    return payload


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def _status_response(request: Request, status_code: int, message: str) -> JSONResponse:
    code, err_type = _classify(status_code)
    payload = error_envelope(
        code=code,
        message=message,
        err_type=err_type,
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=status_code, content=payload)


def _internal_error(request: Request) -> JSONResponse:
    return _status_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, FastAPIHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _status_response(request, exc.status_code, message)
    # Fallback (shouldn't happen with registration), treat as 500
    return _internal_error(request)


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render engine/game exceptions using the status registered in DOMAIN_ERRORS."""
    for exc_type, status_code in DOMAIN_ERRORS.items():
        if isinstance(exc, exc_type):
            logger.info(
                "rejected",
                extra={"request_id": _request_id(request), "reason": type(exc).__name__},
            )
            return _status_response(request, status_code, str(exc))
    return await exception_handler(request, exc)


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, FastAPIHTTPException):
        return await http_exception_handler(request, exc)
    # Otherwise, treat as internal error and log it
    logger.exception("Unhandled exception", extra={"request_id": _request_id(request)})
    return _internal_error(request)


async def request_validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    # Map Pydantic/FastAPI validation errors to our structured envelope with 422
    errors = []
    rve = cast(RequestValidationError, exc)
    for e in rve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []) if p is not None)
        msg = e.get("msg", "invalid value")
        typ = e.get("type", "value_error")
        errors.append({"field": loc, "code": typ, "message": msg})
    payload = error_envelope(
        code="unprocessable_entity",
        message="Validation error",
        err_type="client_error",
        request_id=_request_id(request),
        field_errors=errors or None,
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=payload)


def _classify(status_code: int) -> Tuple[str, str]:
    if 500 <= status_code < 600:
        return "internal_error", "server_error"
    code = _STATUS_CODES.get(status_code, "error")
    return code, "client_error" if 400 <= status_code < 500 else "server_error"
