import logging
from pathlib import Path

import pytest

from accounts.config import get_settings
from accounts.core.logging.builder import make_dict_config, setup_logging
from accounts.core.logging.formatters import ColorFormatter


# Minimal Settings-like object
class DummySettings:
    APP_NAME = "accounts-service"
    ENV = "development"
    LOG_FORMAT = "json"
    LOG_LEVEL = "INFO"
    LOG_TO_STDOUT = False
    LOG_DIR = None  # set per test
    LOG_MAX_BYTES = 1000
    LOG_BACKUP_COUNT = 1
    ENABLE_SQL_LOGGING = False


@pytest.fixture
def restore_logging():
    """Put the session logging configuration back after the test."""
    yield
    setup_logging(get_settings())


def test_make_dict_config_with_files(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"] == str(tmp_path / "app.log")
    assert cfg["handlers"]["error_file"]["formatter"] == "json"
    assert cfg["handlers"]["error_file"]["level"] == "ERROR"


def test_make_dict_config_stdout_only(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    settings.LOG_TO_STDOUT = True
    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["handlers"]["console"]["stream"] == "ext://sys.stdout"


def test_every_handler_carries_filters(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    cfg = make_dict_config(settings)

    for handler in cfg["handlers"].values():
        assert handler["filters"] == ["request_id", "redact"]


def test_text_format_uses_color_formatter():
    settings = DummySettings()
    settings.LOG_FORMAT = "text"
    settings.LOG_TO_STDOUT = True
    cfg = make_dict_config(settings)

    assert cfg["formatters"]["standard"]["()"] is ColorFormatter
    assert cfg["handlers"]["console"]["formatter"] == "standard"


def test_sql_logging_is_off_by_default():
    settings = DummySettings()
    settings.LOG_TO_STDOUT = True
    assert make_dict_config(settings)["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"

    settings.ENABLE_SQL_LOGGING = True
    assert make_dict_config(settings)["loggers"]["sqlalchemy.engine"]["level"] == "INFO"


def test_setup_logging_creates_log_dir(tmp_path, restore_logging):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path / "logs"
    assert not settings.LOG_DIR.exists()

    setup_logging(settings)

    assert settings.LOG_DIR.exists()
    root = logging.getLogger()
    assert root.handlers
    assert any(isinstance(f, logging.Filter) for f in root.filters)


def test_error_file_receives_errors(tmp_path, restore_logging):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    setup_logging(settings)

    logging.getLogger("accounts.test").error("disk.full", extra={"password": "x"})
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = Path(tmp_path / "errors.log").read_text(encoding="utf-8")
    assert "disk.full" in content
    assert "***REDACTED***" in content
    assert '"x"' not in content
