"""
Custom exception handlers for FastAPI.

Every error body has the shape ``{"detail": ..., "status_code": ...}``.

Security:
- Request IDs are logged server-side for tracing but NOT exposed to clients
- Generic error messages for 500 errors to prevent information disclosure
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from core.constants import DB_ERROR, INTERNAL_ERROR, VALIDATION_ERROR, WRONG_ENTITY
from core.logging import get_logger

logger = get_logger("backend.errors")


def _get_request_id() -> str:
    """
    Get the current request ID from context.

    Used for server-side logging only - NOT exposed to clients.
    """
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _response_payload(detail: str, status_code: int) -> dict:
    return {
        "detail": detail,
        "status_code": status_code,
    }


def _is_body_error(errors: list[dict]) -> bool:
    return any((err.get("loc") or [""])[0] == "body" for err in errors)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(str(exc.detail), exc.status_code),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # A body that does not parse is a wrong entity; bad path/query values
        # are plain validation errors. Both are client errors.
        errors = jsonable_encoder(exc.errors())
        detail = WRONG_ENTITY if _is_body_error(errors) else VALIDATION_ERROR
        logger.warning(
            "validation_error",
            detail=detail,
            errors=errors,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                **_response_payload(detail, status.HTTP_400_BAD_REQUEST),
                "errors": errors,
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(
            "database_error",
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_response_payload(DB_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        # Log full details server-side, return a generic message
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_response_payload(INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR),
        )
