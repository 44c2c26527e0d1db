"""
API Error Envelope

Every failure is returned as {"error": {"code": ..., "message": ...}}.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.utils.dates import DateRangeError


logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def provider_failure(code: str, path: str, exc: Exception) -> JSONResponse:
    """Log a failed upstream call and turn it into a 500 envelope."""
    logger.error(f"Error in {path}: {exc}")
    return error_response(500, code, str(exc) or "Unknown error")


async def date_range_error_handler(request: Request, exc: DateRangeError) -> JSONResponse:
    logger.info(f"Rejected {request.url.path}: {exc}")
    return error_response(400, "INVALID_DATE_RANGE", str(exc))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed query parameters (e.g. limit=abc) get the 400 envelope instead of FastAPI's 422."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        name = first.get("loc", ("", ""))[-1]
        message = f"Invalid value for '{name}': {first.get('msg', 'invalid')}"
    else:
        message = "Invalid request parameters"
    logger.info(f"Rejected {request.url.path}: {message}")
    return error_response(400, "INVALID_PARAMETER", message)
