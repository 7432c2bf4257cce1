import asyncio

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from accounts.exceptions import AppError, ErrorKind, db_error_handler
from accounts.exceptions.integrity_classifier import ConstraintKind, classify_integrity_error, extract_columns


class FakePgError(Exception):
    """Stands in for a psycopg error: message plus SQLSTATE."""

    def __init__(self, message: str, pgcode: str):
        super().__init__(message)
        self.pgcode = pgcode


def integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, orig)


class TestIntegrityClassifier:

    def test_sqlite_unique(self):
        exc = integrity_error(Exception("UNIQUE constraint failed: users.email"))
        assert classify_integrity_error(exc) == (ConstraintKind.UNIQUE, None)
        assert extract_columns(exc) == ["email"]

    def test_sqlite_not_null(self):
        exc = integrity_error(Exception("NOT NULL constraint failed: users.name"))
        assert classify_integrity_error(exc)[0] is ConstraintKind.NOT_NULL
        assert extract_columns(exc) == ["name"]

    def test_postgres_unique_by_sqlstate(self):
        orig = FakePgError(
            'duplicate key value violates unique constraint "uq_users_email"\n'
            "DETAIL:  Key (email)=(a@acme.io) already exists.",
            "23505",
        )
        exc = integrity_error(orig)
        assert classify_integrity_error(exc)[0] is ConstraintKind.UNIQUE
        assert extract_columns(exc) == ["email"]

    def test_postgres_unknown_sqlstate(self):
        exc = integrity_error(FakePgError("exclusion violation", "23P01"))
        assert classify_integrity_error(exc)[0] is ConstraintKind.UNKNOWN


@pytest.mark.asyncio
class TestDbErrorHandler:

    async def test_unique_email_becomes_conflict(self):
        with pytest.raises(AppError) as exc_info:
            async with db_error_handler("creating user", "User"):
                raise integrity_error(Exception("UNIQUE constraint failed: users.email"))

        assert exc_info.value.kind is ErrorKind.CONFLICT
        assert exc_info.value.message == "Email already in use"
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    async def test_not_null_becomes_invalid(self):
        with pytest.raises(AppError) as exc_info:
            async with db_error_handler("creating user", "User"):
                raise integrity_error(Exception("NOT NULL constraint failed: users.surname"))

        assert exc_info.value.kind is ErrorKind.INVALID
        assert "surname" in exc_info.value.message

    async def test_other_constraint_violations_are_internal(self):
        orig = FakePgError('insert violates foreign key constraint "fk_x"', "23503")
        with pytest.raises(AppError) as exc_info:
            async with db_error_handler("creating user", "User"):
                raise integrity_error(orig)

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.message.startswith("Error creating user: ")

    async def test_driver_error_becomes_internal_with_driver_text(self):
        with pytest.raises(AppError) as exc_info:
            async with db_error_handler("finding users", "User"):
                raise OperationalError("SELECT ...", {}, Exception("no such table: users"))

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.message.startswith("Error finding users: ")
        assert "no such table: users" in exc_info.value.message

    async def test_statement_cancel_text_becomes_canceled(self):
        with pytest.raises(AppError) as exc_info:
            async with db_error_handler("finding users", "User"):
                raise OperationalError(
                    "SELECT ...", {}, Exception("canceling statement due to statement timeout")
                )

        assert exc_info.value.kind is ErrorKind.CANCELED

    async def test_timeout_becomes_canceled(self):
        with pytest.raises(AppError) as exc_info:
            async with db_error_handler("finding users", "User"):
                raise TimeoutError()

        assert exc_info.value.kind is ErrorKind.CANCELED

    async def test_app_error_passes_through(self):
        original = AppError(ErrorKind.NOT_FOUND, "User not found")
        with pytest.raises(AppError) as exc_info:
            async with db_error_handler("finding user", "User"):
                raise original

        assert exc_info.value is original

    async def test_task_cancellation_is_not_wrapped(self):
        with pytest.raises(asyncio.CancelledError):
            async with db_error_handler("finding user", "User"):
                raise asyncio.CancelledError()

    async def test_unrelated_exceptions_propagate(self):
        with pytest.raises(KeyError):
            async with db_error_handler("finding user", "User"):
                raise KeyError("x")
