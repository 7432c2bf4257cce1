"""
Core pytest configuration for the entire test suite.

Only the essentials shared by every kind of test live here: environment
defaults, logging, the test engine and the Database built on it.

Domain-specific fixtures are located in:
- tests/test_fixtures/service_fixtures.py
- tests/test_fixtures/api_fixtures.py
"""

from __future__ import annotations

import logging
import os
from typing import AsyncGenerator
from urllib.parse import urlparse

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the project imports so collection is not spammed by
# Faker / SQLAlchemy / aiosqlite.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Environment defaults
# -------------------------------
# Settings requires the POSTGRES_* values even when tests run on SQLite.
os.environ.setdefault("POSTGRES_USERNAME", "accounts")
os.environ.setdefault("POSTGRES_PASSWORD", "accounts")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_DB", "accounts")
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from accounts.config import get_settings
from accounts.core.logging.builder import setup_logging
from accounts.database.base import Base
from accounts.database.transaction import Database
from accounts import models  # noqa: F401  registers the tables on Base.metadata

settings = get_settings()
logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Install the application logging configuration once for the session."""
    setup_logging(settings)
    yield


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    """
    1. `TEST_DATABASE_URL` environment variable (CI override, e.g. a real Postgres)
    2. the app's DATABASE_URL when TESTING=true and TEST_POSTGRES_DB is set
    3. an in-memory SQLite database
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    if settings.TESTING and settings.TEST_POSTGRES_DB:
        return settings.DATABASE_URL

    return "sqlite+aiosqlite://"


TEST_DATABASE_URL = get_test_database_url()
logger.info("Using test DB: %s", safe_log_db_url(TEST_DATABASE_URL))


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Fresh schema per test.

    In-memory SQLite lives as long as its connection, so the engine keeps a
    single shared connection (StaticPool).
    """
    if make_url(TEST_DATABASE_URL).get_backend_name() == "sqlite":
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture()
def database(async_engine: AsyncEngine) -> Database:
    return Database(async_engine)


# Domain fixtures
from .test_fixtures.service_fixtures import (  # noqa: E402
    hasher,
    user_service,
    admin_service,
    user_payload,
    admin_payload,
    create_user,
    create_admin,
)
from .test_fixtures.api_fixtures import app, client  # noqa: E402
