"""
Classify SQLAlchemy IntegrityErrors into constraint kinds.

Postgres drivers expose a SQLSTATE code (`pgcode` for psycopg, `sqlstate` for
asyncpg); other backends (SQLite in tests) only give us a message, so we fall
back to keyword matching.
"""

import logging
import re
from enum import Enum

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ConstraintKind(str, Enum):
    UNIQUE = "unique"
    NOT_NULL = "not_null"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"


PGCODE_CONSTRAINT_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: ConstraintKind.UNIQUE,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: ConstraintKind.NOT_NULL,
}

_MESSAGE_KEYWORDS = (
    (ConstraintKind.UNIQUE, ("unique constraint", "unique violation", "duplicate")),
    (ConstraintKind.NOT_NULL, ("not null constraint", "null value in column")),
)


def _sqlstate(orig) -> str | None:
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _constraint_name(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is not None:
        return getattr(diag, "constraint_name", None)
    return getattr(orig, "constraint_name", None)


def classify_integrity_error(exc: IntegrityError) -> tuple[ConstraintKind, str | None]:
    """
    Return (constraint kind, constraint name if the driver reports one).
    """
    orig = exc.orig

    code = _sqlstate(orig)
    if code:
        kind = PGCODE_CONSTRAINT_MAP.get(code, ConstraintKind.UNKNOWN)
        if kind is ConstraintKind.UNKNOWN:
            logger.warning("Unknown Postgres integrity error code encountered", extra={"pgcode": code})
        return kind, _constraint_name(orig)

    normalized = str(orig if orig is not None else exc).lower()
    for kind, keywords in _MESSAGE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return kind, None

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": normalized[:200]})
    return ConstraintKind.UNKNOWN, None


def extract_columns(exc: IntegrityError) -> list[str]:
    """
    Best-effort extraction of the columns involved in the violation.

      - Postgres: 'Key (email)=(a@b.io) already exists.'
      - Postgres: 'null value in column "email" ...'
      - SQLite:   'UNIQUE constraint failed: users.email'
    """
    msg = str(exc.orig if exc.orig is not None else exc)

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE | re.MULTILINE)
    if m:
        return [c.split(".")[-1].strip() for c in re.split(r",\s*", m.group("cols"))]

    return []
