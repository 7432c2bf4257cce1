from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from ..config.settings import Settings


def create_engine(settings: Settings, url: str | None = None) -> AsyncEngine:
    """
    Create the AsyncEngine for the configured database.

    The pool is bounded to DB_POOL_SIZE + DB_MAX_OVERFLOW connections and
    connections are recycled after DB_POOL_RECYCLE seconds. Waiting for a free
    connection gives up after DB_POOL_TIMEOUT seconds.

    SQLite (used by the test suite) runs on a single shared connection, so the
    pool arguments only apply to server databases.
    """
    url = url or settings.DATABASE_URL
    kwargs = {
        "echo": settings.SQLALCHEMY_ECHO,   # Set to False in production
        "pool_pre_ping": True,              # Enables connection health checks
    }

    if make_url(url).get_backend_name() != "sqlite":
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )

    return create_async_engine(url, **kwargs)
