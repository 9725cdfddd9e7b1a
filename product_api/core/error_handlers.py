"""
Exception handlers: every failure leaves the API as the error envelope
`{"success": false, "message": ..., "errors"?: {...}}`.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_api.core.exceptions import AppError
from product_api.schemas.envelope import ErrorResponse

logger = structlog.get_logger(__name__)


def _envelope(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.to_content(), headers=headers)


def collect_field_errors(errors) -> dict[str, list[str]]:
    """Group pydantic errors by field name, keeping the first message per field."""
    fields: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        field = loc[-1] if loc else "body"
        if field not in fields:
            fields[field] = [error.get("msg", "Invalid value")]
    return fields


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    errors = getattr(exc, "errors", None)
    return _envelope(exc.status_code, exc.message, errors=errors, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _envelope(422, "Validation failed", errors=collect_field_errors(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Resource not found" if exc.status_code == 404 else str(exc.detail)
    return _envelope(exc.status_code, message, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, tell the client nothing internal."""
    logger.exception("request.unhandled_error", path=request.url.path)
    return _envelope(500, "Server Error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
