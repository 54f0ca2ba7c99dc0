from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers.base import BaseDBHandler
from app.models import Book, Entry


class EntryDBHandler(BaseDBHandler[Entry]):
    def __init__(self):
        super().__init__(Entry)

    async def get_entry_with_owner(
        self, entry_id: uuid.UUID, *, db: AsyncSession
    ) -> tuple[Entry, uuid.UUID] | None:
        """Return the entry together with the owner id of its parent book."""
        stmt = (
            select(Entry, Book.user_id)
            .join(Book, Entry.book_id == Book.id)
            .where(Entry.id == entry_id)
        )
        result = await db.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]
