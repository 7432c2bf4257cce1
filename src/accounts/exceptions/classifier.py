"""
Projections of an error onto logging and HTTP.

All functions accept any exception: a non-AppError is treated as an INTERNAL
error, so this module is the single place where failures are normalized.

| Kind                                                   | Severity | HTTP |
| ------------------------------------------------------ | -------- | ---- |
| internal, internal_invalid, unknown, not_injected      | ERROR    | 500  |
| conflict                                               | ERROR    | 409  |
| not_implemented                                        | WARNING  | 501  |
| canceled                                               | WARNING  | 500  |
| forbidden                                              | WARNING  | 403  |
| invalid                                                | INFO     | 400  |
| not_found                                              | INFO     | 404  |
| unauthorized, not_authenticated, should_logout         | INFO     | 401  |
| unavailable                                            | INFO     | 503  |
| exists, email_already_in_use                           | INFO     | 500  |
"""

from __future__ import annotations

import logging
from typing import Any

from .base import AppError, ErrorKind

GENERIC_ERROR_MESSAGE = "An error occurred"

_ERROR_KINDS = frozenset({
    ErrorKind.INTERNAL,
    ErrorKind.INTERNAL_INVALID,
    ErrorKind.UNKNOWN,
    ErrorKind.CONFLICT,
    ErrorKind.NOT_INJECTED,
})

_WARNING_KINDS = frozenset({
    ErrorKind.NOT_IMPLEMENTED,
    ErrorKind.CANCELED,
    ErrorKind.FORBIDDEN,
})

_HTTP_STATUS = {
    ErrorKind.CONFLICT: 409,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NOT_IMPLEMENTED: 501,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_AUTHENTICATED: 401,
    ErrorKind.SHOULD_LOGOUT: 401,
    ErrorKind.INTERNAL: 500,
    ErrorKind.UNAVAILABLE: 503,
}

# kinds whose message is never shown to clients
_HIDDEN_MESSAGE_KINDS = frozenset({ErrorKind.INTERNAL, ErrorKind.UNKNOWN})


def error_kind(exc: BaseException | None) -> ErrorKind | None:
    """Kind of an AppError; INTERNAL for anything else; None for no error."""
    if exc is None:
        return None
    if isinstance(exc, AppError):
        return exc.kind
    return ErrorKind.INTERNAL


def log_severity(kind: ErrorKind) -> int:
    """Map a kind to a `logging` level (ERROR, WARNING or INFO)."""
    if kind in _ERROR_KINDS:
        return logging.ERROR
    if kind in _WARNING_KINDS:
        return logging.WARNING
    return logging.INFO


def http_status(kind: ErrorKind) -> int:
    """Map a kind to an HTTP status code; unmapped kinds are 500."""
    return _HTTP_STATUS.get(kind, 500)


def error_message(exc: BaseException) -> str:
    """Raw message of an error, for logs."""
    if isinstance(exc, AppError):
        return exc.message
    return str(exc)


def external_message(exc: BaseException) -> str:
    """
    Message that may be shown to clients.

    Internal/unknown errors, empty messages and non-AppError exceptions are
    replaced by a generic phrase so diagnostic text never leaks.
    """
    if not isinstance(exc, AppError):
        return GENERIC_ERROR_MESSAGE
    if not exc.message or exc.kind in _HIDDEN_MESSAGE_KINDS:
        return GENERIC_ERROR_MESSAGE
    return exc.message


def error_payload(exc: BaseException, details: Any = None) -> dict[str, Any]:
    """Build the JSON error envelope: {"code", "message", "details"}."""
    return {
        "code": error_kind(exc).value,
        "message": external_message(exc),
        "details": details,
    }


def error_log_fields(exc: BaseException) -> dict[str, Any]:
    """Structured fields describing an error (for `extra=`)."""
    if isinstance(exc, AppError):
        return {
            "code": exc.kind.value,
            "origin_file": exc.origin.file,
            "origin_line": exc.origin.line,
            "origin_fn": exc.origin.function,
        }
    return {"code": ErrorKind.INTERNAL.value, "error_type": type(exc).__name__}


def log_error(logger: logging.Logger, exc: BaseException, *, stacklevel: int = 1, **extra: Any) -> None:
    """
    Log an error on the channel matching its kind.

    The record's own location points to the caller of log_error() (raise
    `stacklevel` when wrapping this helper); the error's origin travels in the
    `origin_*` extras.
    """
    kind = error_kind(exc)
    fields = error_log_fields(exc)
    fields.update(extra)

    level = log_severity(kind) if isinstance(exc, AppError) else logging.ERROR
    exc_info = exc if not isinstance(exc, AppError) else None

    logger.log(level, error_message(exc), extra=fields, exc_info=exc_info, stacklevel=stacklevel + 1)


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "error_kind",
    "error_log_fields",
    "error_message",
    "error_payload",
    "external_message",
    "http_status",
    "log_error",
    "log_severity",
]
