"""
Transaction handles and their nesting rule.

A service operation either starts its own transaction or joins the one its
caller passes in:

    async with database.transaction(tx) as handle:
        ...
        await handle.commit()

- `tx is None`: a new session is opened and a connection is checked out of
  the pool immediately. The handle OWNS the transaction: commit/rollback hit
  the database and then close the session.
- `tx` given: the handle JOINS it. It shares the session and the `now`
  timestamp of `tx` and its commit/rollback do nothing; only the outermost
  handle finishes the real transaction.

`now` is fixed when the owning transaction starts (UTC, whole seconds) so
everything inside one transaction observes a single instant.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..exceptions import AppError, ErrorKind, errorf, log_error
from .base import Base

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def truncate_to_second(ts: datetime) -> datetime:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.replace(microsecond=0)


class Transaction:
    """
    Handle over one database transaction.

    Attributes:
        session: the AsyncSession all statements of the transaction run on
        now: timestamp fixed at transaction start
        owner: False for a handle joined to an outer transaction
    """

    def __init__(self, session: AsyncSession, now: datetime, *, owner: bool = True):
        self.session = session
        self._now = now
        self.owner = owner
        self._finished = False

    @property
    def now(self) -> datetime:
        return self._now

    @property
    def finished(self) -> bool:
        return self._finished

    def join(self) -> "Transaction":
        """Return a non-owning handle sharing this transaction."""
        return Transaction(self.session, self._now, owner=False)

    async def commit(self) -> None:
        if not self.owner:
            return
        if self._finished:
            raise errorf(ErrorKind.INTERNAL, "Error committing transaction: transaction already finished")

        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            # left unfinished: the caller's rollback still runs
            raise errorf(ErrorKind.INTERNAL, "Error committing transaction: %s", exc) from exc

        self._finished = True
        await self.session.close()
        logger.debug("database.transaction.committed")

    async def rollback(self) -> None:
        """Roll back; a no-op once the transaction is finished or when joined."""
        if not self.owner or self._finished:
            return

        self._finished = True
        # detach first: rollback expires loaded instances, detached ones keep their state
        self.session.expunge_all()
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            raise errorf(ErrorKind.INTERNAL, "Error rolling back transaction: %s", exc) from exc
        finally:
            await self.session.close()
        logger.debug("database.transaction.rolled_back")

    def __repr__(self) -> str:
        return f"<Transaction(owner={self.owner}, now={self._now.isoformat()}, finished={self._finished})>"


class Database:
    """
    Entry point to the relational store: engine, session factory and clock.

    Args:
        engine: the AsyncEngine (see session.create_engine)
        clock: returns the current time; only read when a transaction starts
    """

    def __init__(self, engine: AsyncEngine, *, clock: Callable[[], datetime] = utc_now):
        self.engine = engine
        self.clock = clock
        # expire_on_commit=False keeps returned entities readable after the session closes
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def begin(self, tx: Transaction | None = None) -> Transaction:
        """
        Begin a transaction, or join `tx` when one is given.

        Raises:
            AppError(INTERNAL): the connection could not be acquired
        """
        if tx is not None:
            return tx.join()

        session = self.session_factory()
        try:
            # checks a connection out of the pool and starts the transaction now
            await session.connection()
        except SQLAlchemyError as exc:
            await session.close()
            raise errorf(ErrorKind.INTERNAL, "Error creating transaction: %s", exc) from exc

        return Transaction(session, truncate_to_second(self.clock()), owner=True)

    @asynccontextmanager
    async def transaction(self, tx: Transaction | None = None) -> AsyncIterator[Transaction]:
        """
        Scoped transaction: always rolled back on exit unless committed.

        A failing rollback is logged and never replaces the exception that is
        already propagating.
        """
        handle = await self.begin(tx)
        try:
            yield handle
        finally:
            try:
                await handle.rollback()
            except AppError as exc:
                log_error(logger, exc, event="database.transaction.rollback_failed")

    async def create_all(self) -> None:
        """Create every table known to the ORM metadata."""
        from .. import models  # noqa: F401  registers the tables on Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
