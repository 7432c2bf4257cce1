"""
Logging filters.

- RequestIdFilter: stamps every record with the id of the HTTP request being
  served (contextvar, so it follows the request across awaits and tasks).
- RedactFilter: masks sensitive `extra=` attributes before any handler
  formats the record.

Both filters only annotate records; they always return True.
"""

import contextvars
import logging
from logging import LogRecord
from typing import Any

# Request id for the current execution context; None outside of a request.
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

REDACTED = "***REDACTED***"


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context.

    Returns:
        token: pass it to reset_request_id() to restore the previous value
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee a `request_id` attribute on every LogRecord.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar
    set by RequestIDMiddleware, then the sentinel "-" (so "%(request_id)s"
    never fails in a format string).
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """
    Mask sensitive attributes on a record.

    Top-level attributes whose name is sensitive are replaced, and so are
    matching keys inside dict values (e.g. `extra={"payload": {...}}`).
    """

    SENSITIVE = frozenset({
        "password",
        "hashed_password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "ssn",
    })

    def filter(self, record: LogRecord) -> bool:
        for key, value in list(record.__dict__.items()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = REDACTED
            elif isinstance(value, dict):
                record.__dict__[key] = self._scrub(value)
        return True

    def _scrub(self, payload: dict[str, Any]) -> dict[str, Any]:
        out = {}
        for k, v in payload.items():
            if isinstance(k, str) and k.lower() in self.SENSITIVE:
                out[k] = REDACTED
            elif isinstance(v, dict):
                out[k] = self._scrub(v)
            else:
                out[k] = v
        return out
