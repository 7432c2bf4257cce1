from .base import AppError, ErrorKind, Origin, CANCELED_MARKERS, capture_origin, errorf, is_cancellation_message
from .classifier import (
    GENERIC_ERROR_MESSAGE,
    error_kind,
    error_log_fields,
    error_message,
    error_payload,
    external_message,
    http_status,
    log_error,
    log_severity,
)
from .mapper import db_error_handler, map_integrity_error

__all__ = [
    "AppError",
    "ErrorKind",
    "Origin",
    "CANCELED_MARKERS",
    "GENERIC_ERROR_MESSAGE",
    "capture_origin",
    "db_error_handler",
    "errorf",
    "error_kind",
    "error_log_fields",
    "error_message",
    "error_payload",
    "external_message",
    "http_status",
    "is_cancellation_message",
    "log_error",
    "log_severity",
    "map_integrity_error",
]
