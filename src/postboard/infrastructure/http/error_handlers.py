"""Exception handlers rendering every failure into the error envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from postboard.application.dto.response_models import ApiErrorResponse
from postboard.application.errors import ApiError

logger = logging.getLogger(__name__)


def error_response(*, status_code: int, message: str) -> JSONResponse:
    """Return a JSON error envelope with the given status code."""

    return JSONResponse(
        status_code=status_code,
        content=ApiErrorResponse(message=message).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers for typed errors, HTTP errors and request validation."""

    @app.exception_handler(ApiError)
    async def handle_api_error(_request: Request, exc: ApiError) -> JSONResponse:
        return error_response(status_code=exc.status_code, message=exc.message)

    @app.exception_handler(HTTPException)
    async def handle_http_exception(_request: Request, exc: HTTPException) -> JSONResponse:
        return error_response(status_code=exc.status_code, message=str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info(
            "request_validation_failed path=%s errors=%d",
            request.url.path,
            len(exc.errors()),
        )
        return error_response(status_code=400, message="Invalid request")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_request_error path=%s error=%s",
            request.url.path,
            type(exc).__name__,
        )
        return error_response(status_code=500, message="Internal server error")
