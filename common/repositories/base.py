from contextlib import asynccontextmanager
from typing import Generic, TypeVar, List, Type, AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.db.session import Database

EntityType = TypeVar("EntityType")
DomainModelType = TypeVar("DomainModelType")


class BaseRepository(Generic[EntityType, DomainModelType]):
    """
    Base repository over a Database.

    Sessions are acquired per operation and released immediately, unless the
    caller opened ``db.transaction()``, in which case every operation joins
    that transaction's session and commits with it.

    Example:
        repo = AccountRepository(db)
        account = await repo.get("acct-1")  # acquires and releases a session

        async with db.transaction():
            await repo.upsert(...)            # shares the transaction session
    """

    def __init__(
        self,
        entity_class: Type[EntityType],
        domain_class: Type[DomainModelType],
        db: Database,
    ):
        self.entity_class = entity_class
        self.domain_class = domain_class
        self.db = db

    @asynccontextmanager
    async def _get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a session for an operation.

        Driver and ORM failures are translated by ``_translate_error`` so
        callers only ever see the repository's own error type.
        """
        try:
            async with self.db.session() as session:
                yield session
        except SQLAlchemyError as e:
            raise self._translate_error(e) from e

    @asynccontextmanager
    async def _transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Group several operations of this repository in one transaction."""
        try:
            async with self.db.transaction() as session:
                yield session
        except SQLAlchemyError as e:
            raise self._translate_error(e) from e

    def _translate_error(self, error: SQLAlchemyError) -> Exception:
        """Map a storage failure to the domain's error type. Override per domain."""
        return error

    @property
    def _dialect_name(self) -> str:
        return self.db.dialect_name

    def _entity_to_domain(self, entity: EntityType) -> DomainModelType:
        """Convert database entity to domain model."""
        return self.domain_class.model_validate(entity)

    def _entities_to_domain(self, entities: List[EntityType]) -> List[DomainModelType]:
        """Convert list of database entities to domain models."""
        return [self._entity_to_domain(entity) for entity in entities]
