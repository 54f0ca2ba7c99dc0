from __future__ import annotations

import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers.base import BaseDBHandler
from app.models import Book, Entry
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.book")


class BookDBHandler(BaseDBHandler[Book]):
    def __init__(self):
        super().__init__(Book)

    async def get_books_by_owner(
        self, owner_id: uuid.UUID, *, db: AsyncSession
    ) -> list[Book]:
        """All books of one user, newest first."""
        return await self.get_multi_by_attributes(
            db=db, user_id=owner_id, order_by=[Book.created_at.desc()]
        )

    async def get_entries(self, book_id: uuid.UUID, *, db: AsyncSession) -> list[Entry]:
        """Entries of a book, oldest first."""
        stmt = (
            select(Entry)
            .where(Entry.book_id == book_id)
            .order_by(Entry.created_at.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def delete_with_entries(self, book_id: uuid.UUID, *, db: AsyncSession) -> int:
        """
        Delete a book's entries, then the book itself.

        Both statements run on the caller's transaction; the caller commits.
        Returns the number of entries removed.
        """
        try:
            entries_result = await db.execute(
                delete(Entry).where(Entry.book_id == book_id)
            )
            await db.execute(delete(Book).where(Book.id == book_id))
            return entries_result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Error deleting book {book_id} and its entries: {e}", exc_info=True)
            raise
