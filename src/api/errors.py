"""
Exception handlers.

Every failure leaves the API as ``{message, code, suggestion, details}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.schemas import ErrorResponse
from src.config import settings
from src.domain.entities import InvalidStateTransition
from src.domain.errors import MaalaError, ServerError

logger = logging.getLogger(__name__)


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


def add_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MaalaError)
    async def maala_error_handler(request: Request, exc: MaalaError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(
            exc.status_code,
            ErrorResponse(
                message=exc.message,
                code=exc.code,
                suggestion=exc.suggestion,
                details=exc.details,
            ),
        )

    @app.exception_handler(InvalidStateTransition)
    async def transition_error_handler(request: Request, exc: InvalidStateTransition):
        return _error(
            409,
            ErrorResponse(
                message=str(exc),
                code="INVALID_TRANSITION",
                suggestion="Refresh the subscription and try again",
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(
            400,
            ErrorResponse(
                message="Input validation failed",
                code="VALIDATION_ERROR",
                suggestion="Please check your input and try again",
                details=[
                    {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                    for err in exc.errors()
                ],
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(
            exc.status_code,
            ErrorResponse(message=str(exc.detail), code="HTTP_ERROR"),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url.path,
            exc_info=exc,
        )
        error = ServerError(
            "An internal error occurred. Please try again later."
            if settings.is_production
            else str(exc)
        )
        return _error(
            error.status_code,
            ErrorResponse(
                message=error.message, code=error.code, suggestion=error.suggestion
            ),
        )
