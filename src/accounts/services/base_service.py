"""
CRUD service operations shared by users and admins.

Every operation has the same shape:

1. begin a transaction, or join the one passed as `tx`
2. do the work through the repository bound to that transaction
3. commit (a no-op when joined)

Leaving the `async with database.transaction(tx)` block always rolls back,
which does nothing once the commit went through. Errors propagate as
AppError: validation failures are INVALID, missing rows NOT_FOUND, duplicate
emails CONFLICT and everything else INTERNAL.
"""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect

from ..database.base import Base
from ..database.transaction import Database, Transaction
from ..exceptions import ErrorKind, errorf
from ..repositories.base_repository import BaseRepository
from ..schemas.common import ListFilter
from ..security.passwords import PasswordHasher, hash_password

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)

EMAIL_IN_USE_MESSAGE = "Email already in use"


def column_values(entity: Base) -> dict[str, Any]:
    return {attr.key: getattr(entity, attr.key) for attr in inspect(entity).mapper.column_attrs}


def detached_copy(entity: ModelType) -> ModelType:
    """A transient instance carrying the column values of `entity`."""
    return type(entity)(**column_values(entity))


def copy_columns(source: Base, target: Base) -> None:
    for key, value in column_values(source).items():
        if getattr(target, key) != value:
            setattr(target, key, value)


class AccountService(Generic[ModelType]):
    """
    Base class of UserService and AdminService.

    Subclasses set `repository_class` and implement `build_entity` and
    `apply_patch`, the only two steps that depend on the entity kind.
    """

    repository_class: type[BaseRepository] = BaseRepository

    def __init__(self, database: Database, hasher: PasswordHasher):
        self.database = database
        self.hasher = hasher

    @property
    def entity_name(self) -> str:
        return self.repository_class.__name__.removesuffix("Repository").lower()

    def repository(self, tx: Transaction) -> BaseRepository:
        return self.repository_class(tx)

    def _event(self, operation: str, outcome: str) -> str:
        return f"service.{self.entity_name}.{operation}.{outcome}"

    async def _hash(self, plain: str) -> str:
        # an empty password stays empty so that validation reports it
        if not plain:
            return ""
        return await hash_password(self.hasher, plain)

    # --- hooks -------------------------------------------------------------------------------------------------------

    def build_entity(self, data: Any, hashed_password: str) -> ModelType:
        raise NotImplementedError

    def apply_patch(self, entity: ModelType, patch: Any) -> None:
        raise NotImplementedError

    # --- operations --------------------------------------------------------------------------------------------------

    async def create(self, data: Any, tx: Transaction | None = None) -> ModelType:
        """
        Hash the password, build and validate the entity, then insert it.

        Raises:
            AppError(INVALID): the entity failed validation (nothing is written)
            AppError(CONFLICT): the email is already in use
        """
        logger.debug(self._event("create", "start"))
        async with self.database.transaction(tx) as handle:
            entity = self.build_entity(data, await self._hash(data.password))
            entity.validate()

            repo = self.repository(handle)
            if await repo.email_in_use(entity.email):
                raise errorf(ErrorKind.CONFLICT, EMAIL_IN_USE_MESSAGE)

            await repo.insert(entity)
            await handle.commit()

        logger.info(self._event("create", "success"), extra={"id": entity.id})
        return entity

    async def find_by_id(self, entity_id: int, tx: Transaction | None = None) -> ModelType:
        """
        Raises:
            AppError(NOT_FOUND): no row has this id
        """
        async with self.database.transaction(tx) as handle:
            return await self.repository(handle).get_by_id_or_raise(entity_id)

    async def find_many(self, filters: ListFilter, tx: Transaction | None = None) -> tuple[list[ModelType], int]:
        """Return (page of entities, total matches ignoring pagination)."""
        async with self.database.transaction(tx) as handle:
            return await self.repository(handle).find_many(filters)

    async def update(self, entity_id: int, patch: Any, tx: Transaction | None = None) -> ModelType:
        """
        Apply the set fields of `patch` to the stored entity.

        The email uniqueness check ignores the entity's own row. The final
        state of the entity, not just the changed fields, must validate.

        Raises:
            AppError(NOT_FOUND): no row has this id
            AppError(CONFLICT): another row already holds the new email
            AppError(INVALID): the patched entity failed validation
        """
        logger.debug(
            self._event("update", "start"),
            extra={"id": entity_id, "provided_keys": sorted(patch.model_fields_set)},
        )
        async with self.database.transaction(tx) as handle:
            repo = self.repository(handle)
            entity = await repo.get_by_id_or_raise(entity_id)

            # the patch goes to a detached draft; the tracked entity only
            # changes once the draft passed every check
            draft = detached_copy(entity)
            self.apply_patch(draft, patch)

            if patch.email.is_set and await repo.email_in_use(draft.email, exclude_id=entity.id):
                raise errorf(ErrorKind.CONFLICT, EMAIL_IN_USE_MESSAGE)

            if patch.password.is_set:
                draft.password = await self._hash(patch.password.value)

            draft.validate()

            copy_columns(draft, entity)
            await repo.save(entity)
            await handle.commit()

        logger.info(self._event("update", "success"), extra={"id": entity_id})
        return entity

    async def delete(self, entity_id: int, tx: Transaction | None = None) -> None:
        """
        Raises:
            AppError(NOT_FOUND): no row has this id (also on a second delete)
        """
        async with self.database.transaction(tx) as handle:
            repo = self.repository(handle)
            entity = await repo.get_by_id_or_raise(entity_id)
            await repo.delete(entity)
            await handle.commit()

        logger.info(self._event("delete", "success"), extra={"id": entity_id})
