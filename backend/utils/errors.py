# backend/utils/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error rendered as {"status": ..., "message": ...}."""

    status_code = 500
    status = "error"
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "All fields are required"


class ConflictError(AppError):
    status_code = 400
    status = "failed"
    default_message = "Email or username already in use"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class AuthError(AppError):
    status_code = 401
    default_message = "Wrong password"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Token not found or not logged in"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied"


class StoreError(AppError):
    status_code = 500
    default_message = "Database error"


def error_response(status_code: int, message: str, status: str = "error") -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": status, "message": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    if first.get("type") == "missing" or first.get("type") == "string_too_short":
        return f"All fields are required ({field})" if field else ValidationError.default_message
    msg = first.get("msg", "Invalid input")
    return f"{field}: {msg}" if field else msg


# Wire the error taxonomy into the application
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return error_response(exc.status_code, exc.message, exc.status)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return error_response(404, "Endpoint not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return error_response(StoreError.status_code, StoreError.default_message)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error")
