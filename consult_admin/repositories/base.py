"""
Base repository class for data access patterns.
"""

from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from consult_admin.core.logger import get_logger
from consult_admin.core.results import IdentityError, IdentityResult
from consult_admin.models.base import Base

logger = get_logger()
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """Base repository with common async read and write-through operations.

    Every write commits immediately; callers chaining several writes get
    no transaction spanning them.
    """

    def __init__(self, session: AsyncSession, model: type[ModelType]) -> None:
        self.session = session
        self.model = model

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Get entity by primary key."""
        return await self.session.get(self.model, entity_id)

    async def get_all(self, filters: dict[str, Any] | None = None) -> list[ModelType]:
        """Get all entities with optional equality filtering."""
        stmt = select(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    column_attr = getattr(self.model, field)
                    if isinstance(value, bool) or value is None:
                        stmt = stmt.where(column_attr.is_(value))
                    else:
                        stmt = stmt.where(column_attr == value)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_field(self, field_name: str, field_value: object) -> ModelType | None:
        """Get a single entity by field value."""
        if not field_name.isidentifier() or not hasattr(self.model, field_name):
            logger.warning(
                "Field not found in model",
                field_name=field_name,
                model=self.model.__name__,
            )
            return None

        stmt = select(self.model).where(getattr(self.model, field_name) == field_value)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(self, instance: ModelType) -> IdentityResult:
        """Insert an entity and commit."""
        self.session.add(instance)
        return await self._commit("Created entity", instance)

    async def save(self, instance: ModelType) -> IdentityResult:
        """Persist pending changes of an entity and commit."""
        self.session.add(instance)
        return await self._commit("Updated entity", instance)

    async def remove(self, instance: ModelType) -> IdentityResult:
        """Delete an entity and commit."""
        await self.session.delete(instance)
        return await self._commit("Deleted entity", instance, refresh=False)

    async def _commit(
        self, message: str, instance: ModelType, *, refresh: bool = True
    ) -> IdentityResult:
        entity_id = None
        try:
            await self.session.flush()
            entity_id = str(getattr(instance, "id", None))
            await self.session.commit()
            if refresh:
                await self.session.refresh(instance)
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning(
                "Store rejected write",
                model=self.model.__name__,
                entity_id=entity_id,
                error=str(exc.orig),
            )
            return IdentityResult.failed(
                IdentityError(
                    code="StoreFailure",
                    description=f"The store rejected the operation: {exc.orig}",
                )
            )
        except StaleDataError as exc:
            await self.session.rollback()
            logger.warning(
                "Entity changed or vanished before write",
                model=self.model.__name__,
                entity_id=entity_id,
                error=str(exc),
            )
            return IdentityResult.failed(
                IdentityError(
                    code="ConcurrencyFailure",
                    description="Optimistic concurrency failure, object has been modified.",
                )
            )
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(
                "Failed to write entity",
                model=self.model.__name__,
                entity_id=entity_id,
                error=str(exc),
            )
            raise

        logger.info(message, model=self.model.__name__, entity_id=entity_id)
        return IdentityResult.success()
