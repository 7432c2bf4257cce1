"""
Application error model.

Every failure that crosses a service boundary is an `AppError`: a fixed
`ErrorKind`, a human-readable message and the origin (file, line, function)
where the error was built.

- `kind` drives both the log severity and the HTTP status (see classifier.py).
- `message` is safe to log. It is NOT always safe to show to clients: internal
  errors carry driver text for operators only.
- `origin` is diagnostic data for the logs; it never reaches a response body.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import NamedTuple


class ErrorKind(str, Enum):
    # standard kinds
    CANCELED = "canceled"                   # caller aborted / timed out
    CONFLICT = "conflict"                   # conflict with current state
    INTERNAL = "internal"                   # internal error
    INVALID = "invalid"                     # invalid input
    NOT_FOUND = "not_found"                 # resource not found
    NOT_IMPLEMENTED = "not_implemented"     # feature not implemented
    UNAUTHORIZED = "unauthorized"           # access denied
    UNKNOWN = "unknown"                     # unknown error
    FORBIDDEN = "forbidden"                 # access forbidden
    EXISTS = "exists"                       # resource already exists
    NOT_INJECTED = "not_injected"           # collaborator not wired
    UNAVAILABLE = "unavailable"             # resource is not available

    # reserved for an authentication layer
    NOT_AUTHENTICATED = "not_authenticated"
    SHOULD_LOGOUT = "should_logout"
    EMAIL_ALREADY_IN_USE = "email_already_in_use"

    # sub kinds
    INTERNAL_INVALID = "internal_invalid"   # invalid data for internal state


# Text fragments that identify a cancellation surfaced through a generic message.
CANCELED_MARKERS = (
    "context canceled",
    "canceling statement due to user request",
    "canceling statement due to statement timeout",
)


class Origin(NamedTuple):
    file: str
    line: int
    function: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


def capture_origin(stacklevel: int = 1) -> Origin:
    """
    Return the location `stacklevel` frames above the caller.

    stacklevel=1 is the function calling capture_origin(), like warnings.warn().
    """
    frame = sys._getframe(stacklevel)
    code = frame.f_code
    return Origin(code.co_filename, frame.f_lineno, code.co_qualname)


def is_cancellation_message(message: str) -> bool:
    return any(marker in message for marker in CANCELED_MARKERS)


class AppError(Exception):
    """
    Classified application error.

    Construction normalizes cancellations: when the message contains a
    cancellation marker the kind becomes CANCELED, whatever kind was asked for.

    Args:
        kind: the ErrorKind (or its string value)
        message: human-readable, already formatted message
        origin: explicit origin; defaults to the line that built the error
        stacklevel: frames to skip when capturing the origin (for helpers)
    """

    def __init__(
        self,
        kind: ErrorKind | str,
        message: str = "",
        *,
        origin: Origin | None = None,
        stacklevel: int = 1,
    ):
        kind = ErrorKind(kind)
        if kind is not ErrorKind.CANCELED and is_cancellation_message(message):
            kind = ErrorKind.CANCELED

        super().__init__(message)
        self.kind = kind
        self.message = message
        self.origin = origin or capture_origin(stacklevel + 1)

    @property
    def code(self) -> str:
        return self.kind.value

    def __str__(self) -> str:
        return f"code={self.kind.value} message={self.message}"

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.value!r}, message={self.message!r}, origin={str(self.origin)!r})"


def errorf(kind: ErrorKind | str, fmt: str, *args: object, origin: Origin | None = None) -> AppError:
    """
    Build an AppError from a %-style format string.

        raise errorf(ErrorKind.INTERNAL, "Error creating user: %s", exc) from exc

    The origin is the line calling errorf().
    """
    message = fmt % args if args else fmt
    return AppError(kind, message, origin=origin, stacklevel=2)


__all__ = [
    "AppError",
    "ErrorKind",
    "Origin",
    "CANCELED_MARKERS",
    "capture_origin",
    "errorf",
    "is_cancellation_message",
]
