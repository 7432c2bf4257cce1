"""
Logging builder: turn Settings into a dictConfig mapping and apply it.

    setup_logging(settings)

Handler selection:

| LOG_TO_STDOUT | LOG_DIR | Active handlers                |
| ------------- | ------- | ------------------------------ |
| true          | any     | console + error_console        |
| false         | unset   | console + error_console        |
| false         | set     | console + file + error_file    |
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

from ...config.settings import Settings
from ...utils.logging import get_project_name
from .filters import RedactFilter, RequestIdFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)

STANDARD_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping.

      - formatters: "standard" (colored in text mode) and "json"
      - filters: "request_id", "redact"
      - handlers: see the module table
      - loggers: root, uvicorn and sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": STANDARD_FORMAT,
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": settings.APP_NAME or get_project_name(),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": _loggers(settings, list(handlers)),
    }


def _loggers(settings: Settings, handler_names: list[str]) -> dict[str, dict]:
    def entry(level: str, names: list[str], propagate: bool = False) -> dict:
        return {"level": level, "handlers": names, "propagate": propagate}

    # bound parameters end up in SQL logs: off unless ENABLE_SQL_LOGGING
    sql_level = "INFO" if settings.ENABLE_SQL_LOGGING else "WARNING"

    return {
        "": entry(settings.LOG_LEVEL, handler_names, propagate=True),
        "uvicorn.error": entry(settings.LOG_LEVEL, handler_names),
        "uvicorn.access": entry("INFO", ["console"]),
        "sqlalchemy.engine": entry(sql_level, ["console"]),
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration.

    Creates LOG_DIR when logging to files and adds a RequestIdFilter on the
    root logger so "%(request_id)s" is always resolvable.
    """
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(RequestIdFilter())

    logging.getLogger(__name__).debug(
        "logging.configured",
        extra={"log_format": settings.LOG_FORMAT, "log_level": settings.LOG_LEVEL, "to_files": _writes_files(settings)},
    )
