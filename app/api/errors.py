"""JSON error envelope for API responses."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.errors import AuthError


logger = logging.getLogger(__name__)

_HTTP_CODES: dict[int, tuple[str, str]] = {
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", "Authentication required"),
    status.HTTP_403_FORBIDDEN: ("ACCESS_DENIED", "Access denied"),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "Endpoint not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "Method not allowed"),
}


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = {
        "success": False,
        "message": message,
        "error": {"code": code, "message": message, "details": details or {}},
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def _http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code, default_message = _HTTP_CODES.get(exc.status_code, ("HTTP_ERROR", "Request failed"))
    message = exc.detail if isinstance(exc.detail, str) and exc.status_code not in (404, 405) else default_message
    return error_response(exc.status_code, code, message, headers=getattr(exc, "headers", None))


async def _validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return error_response(status.HTTP_400_BAD_REQUEST, "INVALID_JSON", "Invalid JSON payload")

    details: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return error_response(
        422,
        "VALIDATION_FAILED",
        "Validation failed",
        details,
    )


async def _auth_exception(request: Request, exc: AuthError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def _unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("API exception on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "Internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception)
    app.add_exception_handler(RequestValidationError, _validation_exception)
    app.add_exception_handler(AuthError, _auth_exception)
    app.add_exception_handler(Exception, _unhandled_exception)
