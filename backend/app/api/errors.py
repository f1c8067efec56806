from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.exceptions import AppError
from app.schemas.common import ApiErrorResponse

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, message: Any, error: str | None) -> JSONResponse:
    payload = ApiErrorResponse(
        status_code=status_code,
        timestamp=datetime.now(timezone.utc),
        path=request.url.path,
        message=message,
        error=error,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload, exclude_none=True))


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message, extra={"path": request.url.path})
    else:
        logger.info("%s: %s", type(exc).__name__, exc.message, extra={"path": request.url.path})
    return _error_response(request, exc.status_code, exc.message, exc.error)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        phrase: str | None = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = None
    response = _error_response(request, exc.status_code, exc.detail, phrase)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return _error_response(request, 422, messages, "Unprocessable Entity")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Critical Error: %s", exc, extra={"path": request.url.path})
    message = "Internal server error" if get_settings().is_production else str(exc)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, message, None)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
