"""
Error handling middleware.

Every error leaves the API as ``{"error", "message", "type"}``; ``type``
lets clients rebuild the typed domain error.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from campusgig.config.logging import get_logger
from campusgig.domain.exceptions.access_error import NotFoundError, UnauthorizedError
from campusgig.domain.exceptions.base import MarketplaceError
from campusgig.domain.exceptions.job_error import (
    AlreadyAssignedError,
    InvalidTransitionError,
)
from campusgig.domain.exceptions.rating_error import DuplicateRatingError
from campusgig.domain.exceptions.validation_error import ValidationError
from campusgig.infrastructure.monitoring.metrics import record_error

logger = get_logger(__name__)

STATUS_CODES = {
    ValidationError: 400,
    UnauthorizedError: 403,
    NotFoundError: 404,
    InvalidTransitionError: 409,
    AlreadyAssignedError: 409,
    DuplicateRatingError: 409,
}

ERROR_TITLES = {
    ValidationError: "Validation Error",
    UnauthorizedError: "Unauthorized",
    NotFoundError: "Not Found",
    InvalidTransitionError: "Invalid Transition",
    AlreadyAssignedError: "Already Assigned",
    DuplicateRatingError: "Duplicate Rating",
}


def error_body(error: str, message, error_type: str) -> dict:
    return {"error": error, "message": message, "type": error_type}


def status_for(exc: MarketplaceError) -> int:
    for error_class in type(exc).__mro__:
        if error_class in STATUS_CODES:
            return STATUS_CODES[error_class]
    return 500


class ErrorHandlerMiddleware:
    """Error handling middleware for FastAPI."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_error_handlers()

    def add_error_handlers(self) -> None:
        """Add custom error handlers to FastAPI app."""
        add_error_handlers(self.app)


def add_error_handlers(app: FastAPI) -> None:
    """Add custom error handlers to FastAPI app."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        status_code = status_for(exc)
        logger.warning(
            "Request rejected",
            error=str(exc),
            error_type=exc.error_type,
            status_code=status_code,
            path=request.url.path,
        )
        record_error(exc.error_type, "api")
        title = next(
            (ERROR_TITLES[cls] for cls in type(exc).__mro__ if cls in ERROR_TITLES),
            "Marketplace Error",
        )
        return JSONResponse(
            status_code=status_code,
            content=error_body(title, str(exc), exc.error_type),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        logger.warning("Invalid request", errors=exc.errors(), path=request.url.path)
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body(
                "Validation Error", "; ".join(messages), ValidationError.error_type
            ),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error", error=str(exc), path=request.url.path)
        record_error("database_error", "api")
        return JSONResponse(
            status_code=500,
            content=error_body(
                "Database Error", "A database error occurred", "database_error"
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body("HTTP Error", exc.detail, "http_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            exc_info=True,
        )
        record_error("internal_error", "api")
        return JSONResponse(
            status_code=500,
            content=error_body(
                "Internal Server Error",
                "An unexpected error occurred",
                "internal_error",
            ),
        )
