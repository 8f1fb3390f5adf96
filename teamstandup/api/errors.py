"""Exception handlers producing ``{status, message, error: {code, details}}`` bodies."""

import logging
import os
import traceback
from http import HTTPStatus
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamstandup.api.cookies import is_production
from teamstandup.services.errors import ServiceError

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds to validation error paths
_LOC_SOURCES = {"body", "query", "path", "header", "cookie"}


def error_body(status_code: int, message: str, code: str, details: Any = None) -> dict:
    error = {"code": code}
    if details is not None:
        error["details"] = details
    return {"status": status_code, "message": message, "error": error}


def _error_response(
    status_code: int,
    message: str,
    code: str,
    details: Any = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, message, code, details),
        headers=headers,
    )


def _status_code_name(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase.upper().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "HTTP_ERROR"


def format_validation_errors(errors) -> list:
    """Flatten pydantic/FastAPI errors into ``[{field, message}]``."""
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOC_SOURCES]
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.append({"field": ".".join(loc) or "body", "message": message})
    return details


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error_response(exc.status_code, exc.message, exc.error_code, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(400, "Validation failed", "VALIDATION_ERROR", format_validation_errors(exc.errors()))


async def pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, "Validation failed", "VALIDATION_ERROR", format_validation_errors(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(
        exc.status_code,
        str(exc.detail),
        _status_code_name(exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} hit a uniqueness/integrity constraint: {exc.orig}")
    return _error_response(409, "Resource already exists", "DUPLICATE_KEY")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}", exc_info=exc)
    message = "Something went wrong" if is_production() else str(exc)
    details = None
    if os.getenv("ENVIRONMENT", "development").lower() == "development":
        details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return _error_response(500, message, "INTERNAL_ERROR", details)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
