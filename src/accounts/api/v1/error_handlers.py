"""
FastAPI exception handlers producing the JSON error envelope:

    {"code": "<error kind>", "message": "<safe message>", "details": <any>}

The HTTP status comes from the error kind (exceptions.classifier). Internal
diagnostic text and error origins go to the logs only.

Register them from the app factory:

    register_exception_handlers(app)
"""

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...exceptions import AppError, ErrorKind, error_payload, http_status, log_error

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "Invalid request"


def error_response(exc: BaseException, details=None) -> JSONResponse:
    status = http_status(exc.kind) if isinstance(exc, AppError) else 500
    return JSONResponse(status_code=status, content=jsonable_encoder(error_payload(exc, details)))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log_error(logger, exc, method=request.method, path=request.url.path)
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body / query / path: 400 with the validation errors as details."""
    error = AppError(ErrorKind.INVALID, INVALID_REQUEST_MESSAGE)
    logger.info(
        "http.request.invalid",
        extra={"method": request.method, "path": request.url.path, "error_count": len(exc.errors())},
    )
    return error_response(error, details=exc.errors())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unclassified is INTERNAL: 500 with the generic message."""
    log_error(logger, exc, method=request.method, path=request.url.path)
    return error_response(exc)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
