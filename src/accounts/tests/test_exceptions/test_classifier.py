import logging

import pytest

from accounts.exceptions import (
    GENERIC_ERROR_MESSAGE,
    AppError,
    ErrorKind,
    error_kind,
    error_payload,
    external_message,
    http_status,
    log_error,
    log_severity,
)

EXPECTED_STATUS = {
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

EXPECTED_SEVERITY = {
    ErrorKind.INTERNAL: logging.ERROR,
    ErrorKind.INTERNAL_INVALID: logging.ERROR,
    ErrorKind.UNKNOWN: logging.ERROR,
    ErrorKind.CONFLICT: logging.ERROR,
    ErrorKind.NOT_INJECTED: logging.ERROR,
    ErrorKind.NOT_IMPLEMENTED: logging.WARNING,
    ErrorKind.CANCELED: logging.WARNING,
    ErrorKind.FORBIDDEN: logging.WARNING,
}


class TestProjections:

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_http_status_is_total(self, kind):
        assert http_status(kind) == EXPECTED_STATUS.get(kind, 500)

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_log_severity_is_total(self, kind):
        assert log_severity(kind) == EXPECTED_SEVERITY.get(kind, logging.INFO)

    def test_error_kind(self):
        assert error_kind(None) is None
        assert error_kind(AppError(ErrorKind.NOT_FOUND, "x")) is ErrorKind.NOT_FOUND
        assert error_kind(RuntimeError("boom")) is ErrorKind.INTERNAL

    def test_unclassified_error_is_internal_everywhere(self):
        exc = KeyError("missing")
        kind = error_kind(exc)
        assert http_status(kind) == 500
        assert log_severity(kind) == logging.ERROR
        assert external_message(exc) == GENERIC_ERROR_MESSAGE


class TestExternalMessage:

    @pytest.mark.parametrize("kind", [ErrorKind.INTERNAL, ErrorKind.UNKNOWN])
    def test_internal_text_never_leaks(self, kind):
        err = AppError(kind, "Error finding users: relation users does not exist")
        assert external_message(err) == GENERIC_ERROR_MESSAGE

    def test_empty_message_is_replaced(self):
        assert external_message(AppError(ErrorKind.CONFLICT, "")) == GENERIC_ERROR_MESSAGE

    def test_client_errors_keep_their_message(self):
        assert external_message(AppError(ErrorKind.CONFLICT, "Email already in use")) == "Email already in use"

    def test_payload_shape(self):
        payload = error_payload(AppError(ErrorKind.NOT_FOUND, "User not found"), details={"id": 7})
        assert payload == {"code": "not_found", "message": "User not found", "details": {"id": 7}}

    def test_payload_for_unclassified_error(self):
        payload = error_payload(ValueError("secret driver text"))
        assert payload == {"code": "internal", "message": GENERIC_ERROR_MESSAGE, "details": None}


class TestLogError:

    def test_logs_at_kind_severity_with_origin(self, caplog):
        logger = logging.getLogger("accounts.tests.classifier")
        err = AppError(ErrorKind.NOT_FOUND, "User not found")

        with caplog.at_level(logging.DEBUG, logger="accounts.tests.classifier"):
            log_error(logger, err, id=3)

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == "User not found"
        assert record.code == "not_found"
        assert record.origin_file == err.origin.file
        assert record.origin_line == err.origin.line
        assert record.id == 3
        # the record points at the caller of log_error
        assert record.pathname == __file__

    def test_conflict_is_logged_as_error(self, caplog):
        logger = logging.getLogger("accounts.tests.classifier")
        with caplog.at_level(logging.DEBUG, logger="accounts.tests.classifier"):
            log_error(logger, AppError(ErrorKind.CONFLICT, "Email already in use"))
        assert caplog.records[-1].levelno == logging.ERROR

    def test_unclassified_error_logged_with_traceback(self, caplog):
        logger = logging.getLogger("accounts.tests.classifier")
        try:
            raise RuntimeError("boom")
        except RuntimeError as exc:
            with caplog.at_level(logging.DEBUG, logger="accounts.tests.classifier"):
                log_error(logger, exc)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.code == "internal"
        assert record.error_type == "RuntimeError"
        assert record.exc_info is not None
