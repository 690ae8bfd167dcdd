from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import SociopediaError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(SociopediaError)
    async def sociopedia_exception_handler(request: Request, exc: SociopediaError):
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code}: {exc.message}",
                extra={"method": request.method, "path": request.url.path},
                exc_info=exc.__cause__ is not None,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.message,
                code=exc.code,
                details=exc.details
            ).model_dump(),
            headers={"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                code="HTTP_ERROR",
                details=None
            ).model_dump()
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors.
        """
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="Input validation failed",
                code="VALIDATION_ERROR",
                details=jsonable_encoder(exc.errors())
            ).model_dump()
        )

    @app.exception_handler(PyMongoError)
    async def database_exception_handler(request: Request, exc: PyMongoError):
        """
        Document store failures surface as dependency errors without internals.
        """
        logger.error(
            f"Database error: {str(exc)}",
            extra={"method": request.method, "path": request.url.path},
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Database operation failed",
                code="DEPENDENCY_ERROR",
                details=None
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        return internal_error_response()


def internal_error_response() -> JSONResponse:
    """Generic 500 body; exception text only goes to the log."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=INTERNAL_ERROR_MESSAGE,
            code="INTERNAL_ERROR",
            details=None
        ).model_dump()
    )
