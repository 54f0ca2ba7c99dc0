from __future__ import annotations

from functools import wraps
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import LedgerError
from app.models.base import Base
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers")


# Define generic types for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)


def transactional(func):
    """
    Commit the session of ``self.db`` when the wrapped coroutine returns and
    roll it back when it raises.

    Handlers only flush; the service method that owns the unit of work is the
    one decorated, so a multi-statement operation commits or fails as a whole.
    """

    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        db: AsyncSession = self.db
        try:
            result = await func(self, *args, **kwargs)
            await db.commit()
            return result
        except LedgerError:
            await db.rollback()
            raise
        except Exception as e:
            await db.rollback()
            logger.error(f"Transaction failed in {func.__name__}: {e}", exc_info=True)
            raise

    return wrapper


class BaseDBHandler(Generic[ModelType]):
    """Generic handler for database operations with basic CRUD methods."""

    def __init__(self, model: type[ModelType]):
        self.model = model

    async def create(self, obj_dict: dict[str, Any], *, db: AsyncSession) -> ModelType:
        """Add a new record and flush it so generated values are populated."""
        db_obj = self.model(**obj_dict)
        try:
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"IntegrityError creating {self.model.__name__}: {e}")
            # Re-raise IntegrityError so calling code can handle it specifically
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}", exc_info=True)
            raise

    async def get(self, id: Any, *, db: AsyncSession) -> ModelType | None:
        """Get a single record by its primary key."""
        stmt = select(self.model).where(self.model.id == id)
        result = await db.execute(stmt)
        return result.scalars().first()

    async def get_by_attributes(self, *, db: AsyncSession, **kwargs) -> ModelType | None:
        """Get a single record by a set of attributes."""
        stmt = select(self.model).filter_by(**kwargs)
        result = await db.execute(stmt)
        return result.scalars().first()

    async def get_multi_by_attributes(
        self, *, db: AsyncSession, **kwargs
    ) -> list[ModelType]:
        """Get every record matching a set of attributes, optionally ordered."""
        order_by_clauses = kwargs.pop("order_by", None)

        stmt = select(self.model).filter_by(**kwargs)

        if order_by_clauses is not None:
            if isinstance(order_by_clauses, list):
                stmt = stmt.order_by(*order_by_clauses)
            else:
                stmt = stmt.order_by(order_by_clauses)

        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def update(
        self,
        db_obj: ModelType,
        update_data: dict[str, Any],
        *,
        db: AsyncSession,
    ) -> ModelType:
        """Replace the given fields of an existing record."""
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        try:
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except SQLAlchemyError as e:
            logger.error(
                f"Error updating {self.model.__name__} with id {db_obj.id}: {e}",
                exc_info=True,
            )
            raise

    async def remove(self, id: Any, *, db: AsyncSession) -> int:
        """Delete a record by primary key. Returns the number of rows removed."""
        try:
            result = await db.execute(delete(self.model).where(self.model.id == id))
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error(
                f"Error removing {self.model.__name__} with id {id}: {e}",
                exc_info=True,
            )
            raise
