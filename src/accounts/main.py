"""
Application factory.

    uvicorn accounts.main:create_app --factory

create_app() wires settings, logging, the Database and the password hasher
onto `app.state`; tests pass their own Database (and settings) instead.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.v1 import router as api_v1_router
from .api.v1.error_handlers import register_exception_handlers
from .config.settings import Settings, get_settings
from .core.logging import RequestIDMiddleware, setup_logging
from .database.session import create_engine
from .database.transaction import Database
from .security.passwords import BcryptPasswordHasher, PasswordHasher
from .utils.logging import get_project_version

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    password_hasher: PasswordHasher | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings)

    owns_database = database is None
    if database is None:
        database = Database(create_engine(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.DB_CREATE_TABLES:
            await database.create_all()
        logger.info("app.startup", extra={"env": settings.ENV, "app_version": get_project_version()})
        yield
        if owns_database:
            await database.dispose()
        logger.info("app.shutdown")

    app = FastAPI(title=settings.APP_NAME, version=get_project_version(), lifespan=lifespan)

    app.state.settings = settings
    app.state.database = database
    app.state.password_hasher = password_hasher or BcryptPasswordHasher(settings.BCRYPT_ROUNDS)

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(api_v1_router)

    @app.get("/healthz", tags=["health"])
    async def healthz():
        return {"status": "ok"}

    return app
