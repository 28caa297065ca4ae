"""
Global exception handlers rendering the ``{success: false, error}`` envelope.

- HTTPException (FastAPI or Starlette routing) → its status and detail
- RequestValidationError → 400 with the first validation message
- Exception (catch-all) → 500, never leaking internal details
"""

import logging
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


class ApiError(HTTPException):
    """HTTPException carrying optional structured ``details`` for the client."""

    def __init__(self, status_code: int, message: str, details: Optional[Any] = None):
        super().__init__(status_code=status_code, detail=message)
        self.details = details


def clean_message(msg: str) -> str:
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX):]
    return msg


def validation_details(errors: List[dict]) -> List[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in e.get("loc", ()) if loc != "body"),
            "message": clean_message(str(e.get("msg", ""))),
            "type": e.get("type"),
        }
        for e in errors
    ]


def first_validation_message(errors: List[dict], default: str = "Invalid input") -> str:
    if not errors:
        return default
    return clean_message(str(errors[0].get("msg") or default))


def api_error_from_validation(exc: ValidationError, message: str) -> ApiError:
    """Wrap a pydantic ValidationError raised inside a route."""
    return ApiError(status.HTTP_400_BAD_REQUEST, message, details=validation_details(exc.errors()))


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unhandled exception and render the generic 500 envelope."""
    logger.error("unhandled_exception path=%s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Route not found"
        content = {"success": False, "error": message}
        details = getattr(exc, "details", None)
        if details is not None:
            content["details"] = details
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info("validation_error path=%s errors=%d", request.url.path, len(errors))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "error": first_validation_message(errors),
                "details": validation_details(errors),
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        return internal_error_response(request, exc)
