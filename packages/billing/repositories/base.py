from typing import TypeVar

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from common.repositories.base import BaseRepository
from packages.billing.exceptions import StoreError

EntityType = TypeVar("EntityType")
DomainModelType = TypeVar("DomainModelType")


class BillingRepository(BaseRepository[EntityType, DomainModelType]):
    """Billing stores: storage failures surface as StoreError."""

    def _translate_error(self, error: SQLAlchemyError) -> Exception:
        return StoreError(
            f"{self.entity_class.__tablename__} store failed: {error.__class__.__name__}",
        )

    def _insert(self):
        """Dialect insert supporting ``on_conflict_do_nothing``."""
        if self._dialect_name == "sqlite":
            return sqlite.insert(self.entity_class)
        return postgresql.insert(self.entity_class)
