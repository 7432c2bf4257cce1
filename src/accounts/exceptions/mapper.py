import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .base import AppError, ErrorKind, errorf
from .integrity_classifier import ConstraintKind, classify_integrity_error, extract_columns

logger = logging.getLogger(__name__)


# -----------------------
# Mapper
# -----------------------

def map_integrity_error(exc: IntegrityError, action: str, model_name: str | None = None) -> AppError:
    """
    Map a SQLAlchemy IntegrityError to an AppError.

    Unique violations are conflicts and not-null violations invalid input.
    The tables carry no foreign keys or check constraints, so any other
    violation is INTERNAL.
    """
    kind, constraint_name = classify_integrity_error(exc)
    columns = extract_columns(exc)
    model_part = model_name or "Record"

    if kind is ConstraintKind.UNIQUE:
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        if "email" in columns or (constraint_name and "email" in constraint_name):
            return errorf(ErrorKind.CONFLICT, "Email already in use")
        if columns:
            return errorf(ErrorKind.CONFLICT, "%s already exists for field(s): %s", model_part, ", ".join(columns))
        return errorf(ErrorKind.CONFLICT, "%s already exists", model_part)

    if kind is ConstraintKind.NOT_NULL:
        logger.info(
            "mapper.not_null_violation",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        if columns:
            return errorf(ErrorKind.INVALID, "Missing required field(s): %s", ", ".join(columns))
        return errorf(ErrorKind.INVALID, "Missing required field for %s", model_part)

    logger.warning("mapper.unknown_integrity_error", extra={"model": model_part, "constraint": constraint_name})
    return errorf(ErrorKind.INTERNAL, "Error %s: %s", action, exc.orig if exc.orig is not None else exc)


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def db_error_handler(action: str, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler("creating user", "User"):
            ... DB ops ...

    - AppError passes through untouched
    - IntegrityError is classified (see map_integrity_error)
    - any other SQLAlchemyError becomes INTERNAL "Error <action>: <driver text>"
    - TimeoutError becomes CANCELED
    - asyncio.CancelledError is not an Exception and propagates as is

    Rolling back is the caller's job: the transaction handle owns the session.
    """
    try:
        yield
    except AppError:
        raise
    except IntegrityError as exc:
        raise map_integrity_error(exc, action, model_name) from exc
    except TimeoutError as exc:
        logger.warning("mapper.operation_timed_out", extra={"model": model_name, "action": action})
        raise errorf(ErrorKind.INTERNAL, "Error %s: context canceled", action) from exc
    except SQLAlchemyError as exc:
        logger.exception("Unexpected DB error while %s", action, extra={"model": model_name})
        raise errorf(ErrorKind.INTERNAL, "Error %s: %s", action, exc) from exc
