"""
Base repository class providing common database operations.

Repositories run statements on the session of the transaction handle they are
given; they never commit or roll back. Ending the transaction is the job of
whoever began it (the service layer).

Every database failure leaving a repository is an AppError:
  - missing rows on the "or_raise" lookups   -> NOT_FOUND
  - unique email violations                   -> CONFLICT
  - anything else from the driver             -> INTERNAL
"""

import logging
import time
from typing import Generic, Type, TypeVar

from sqlalchemy import func, select

from ..common.pagination import limit_offset
from ..database.base import Base
from ..database.transaction import Transaction
from ..exceptions import ErrorKind, errorf
from ..exceptions.mapper import db_error_handler
from ..schemas.common import ListFilter

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

# Setup logging
logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing the row-level operations shared by
    users and admins.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], tx: Transaction):
        """
        Args:
            model: the model class itself (User, not User()), used to build queries
            tx: the transaction handle whose session runs every statement
        """
        self.model = model
        self.tx = tx

    @property
    def session(self):
        return self.tx.session

    @property
    def entity_name(self) -> str:
        return self.model.__name__.lower()

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def insert(self, entity: ModelType) -> ModelType:
        """
        INSERT the entity; the storage-assigned id is available on return.
        """
        start = time.perf_counter()

        async with db_error_handler(f"creating {self.entity_name}", self.model.__name__):
            self.session.add(entity)
            # flush, not commit: sends the INSERT and fills in the id, the transaction stays open
            await self.session.flush()

        logger.debug(
            "repo.insert.success",
            extra={
                "model": self.model.__name__,
                "id": entity.id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        async with db_error_handler(f"finding {self.entity_name}", self.model.__name__):
            result = await self.session.execute(
                select(self.model).where(self.model.id == entity_id).limit(1)
            )
            return result.scalars().first()

    async def get_by_id_or_raise(self, entity_id: int) -> ModelType:
        """
        Get an entity by its ID or raise NOT_FOUND ("User not found").
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            logger.debug("repo.get.not_found", extra={"model": self.model.__name__, "id": entity_id})
            raise errorf(ErrorKind.NOT_FOUND, "%s not found", self.model.__name__)
        return entity

    async def find_many(self, filters: ListFilter) -> tuple[list[ModelType], int]:
        """
        Return one page of matching entities plus the total number of matches.

        - filters on `id` and `email` are combined with AND
        - newest first (ORDER BY id DESC)
        - the total is a windowed COUNT(*) OVER () computed by the same query,
          so it ignores LIMIT/OFFSET. A page past the end has no rows to
          carry the count and reports a total of 0.
        """
        query = select(self.model, func.count().over().label("total_count"))

        if filters.id is not None:
            query = query.where(self.model.id == filters.id)
        if filters.email is not None:
            query = query.where(self.model.email == filters.email)

        query = query.order_by(self.model.id.desc())

        limit, offset = limit_offset(filters.limit, filters.page)
        if limit is not None:
            query = query.limit(limit).offset(offset)

        async with db_error_handler(f"finding {self.entity_name}s", self.model.__name__):
            result = await self.session.execute(query)
            rows = result.all()

        entities = [row[0] for row in rows]
        total = rows[0].total_count if rows else 0

        logger.debug(
            "repo.find_many.success",
            extra={"model": self.model.__name__, "count": len(entities), "total": total},
        )
        return entities, total

    async def email_in_use(self, email: str, exclude_id: int | None = None) -> bool:
        """True when another row already holds `email`."""
        query = select(self.model.id).where(self.model.email == email)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)

        # no autoflush: a pending change to the email must not hit the unique index first
        async with db_error_handler(f"checking {self.entity_name} email", self.model.__name__):
            with self.session.no_autoflush:
                result = await self.session.execute(query.limit(1))
            return result.scalar_one_or_none() is not None

    # =================================================================================================================
    # Update / Delete
    # =================================================================================================================

    async def save(self, entity: ModelType) -> ModelType:
        """Persist the full row of an already loaded entity."""
        async with db_error_handler(f"updating {self.entity_name}", self.model.__name__):
            self.session.add(entity)
            await self.session.flush()
        return entity

    async def delete(self, entity: ModelType) -> None:
        async with db_error_handler(f"deleting {self.entity_name}", self.model.__name__):
            await self.session.delete(entity)
            await self.session.flush()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(model={self.model.__name__})>"
