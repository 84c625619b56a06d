"""
Gateway error taxonomy.

Every error raised by a route is a GatewayError (an HTTPException), rendered by
the handlers below as `{"error": "<message>"}`. Messages for auth and storage
failures are intentionally generic.
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("elk.store")


class GatewayError(HTTPException):
    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=message or self.default_message, headers=headers)

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(GatewayError):
    status_code = 400
    default_message = "Invalid request body"


class AuthError(GatewayError):
    """Missing credential (401). Use Forbidden for a wrong credential or origin."""

    status_code = 401
    default_message = "Admin authentication required"


class Forbidden(AuthError):
    status_code = 403
    default_message = "Invalid admin credentials"


class NotFoundError(GatewayError):
    status_code = 404
    default_message = "Not found"


class RateLimitError(GatewayError):
    status_code = 429
    default_message = "Rate limit exceeded. Please try again later."


class StorageError(GatewayError):
    status_code = 500
    default_message = "Database operation failed"


def format_validation_errors(errors) -> str:
    """First pydantic error as a single message naming the failing field."""
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    if first.get("type") == "value_error":
        # Raised by our own validators; the message already names the field.
        return str((first.get("ctx") or {}).get("error") or first.get("msg"))
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg") or "invalid value"
    return f"{loc}: {msg}" if loc else msg


def _error_response(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return _error_response(400, format_validation_errors(exc.errors()))

    @app.exception_handler(SQLAlchemyError)
    async def _storage_error(request: Request, exc: SQLAlchemyError):
        # Database text stays in the server log; callers get the generic message.
        logger.error("storage_error path=%s", request.url.path, exc_info=exc)
        return _error_response(StorageError.status_code, StorageError.default_message)
