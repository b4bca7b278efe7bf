"""
orderdesk.api.envelope

Uniform response envelope: `{success, data?, error?: {code, message}}`.

Responsibilities:
- Wrap successful payloads.
- Render every failure (typed, framework, unexpected) in the same shape.
- Never leak tracebacks or internal detail to callers.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from orderdesk.errors import ServiceError
from orderdesk.observability.logging import get_logger

log = get_logger(__name__)

_HTTP_CODES: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    502: "UPSTREAM",
}


def success(data: Any) -> dict[str, Any]:
    return {"success": True, "data": jsonable_encoder(data)}


def failure(code: str, message: str) -> dict[str, Any]:
    return {"success": False, "error": {"code": code, "message": message}}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=failure(code, message))


async def _service_error(_: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request.failed", code=exc.code, error=str(exc))
        # Server-side detail stays in the log; clients get the class default.
        return error_response(exc.status_code, exc.code, type(exc).message)
    return error_response(exc.status_code, exc.code, exc.message)


async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "INTERNAL" if exc.status_code >= 500 else "ERROR")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, code, message)


async def _request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(400, "VALIDATION_ERROR", str(message))


async def _unhandled_error(_: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unhandled_error", error_type=type(exc).__name__)
    return error_response(500, "INTERNAL", "Server error")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, _request_validation_error  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, _unhandled_error)


# --- Module Notes -----------------------------------------------------------
# Starlette routes `Exception` handlers through ServerErrorMiddleware, which still
# re-raises after responding; ASGI servers log it, clients only see the envelope.
