"""
Ownership checks binding an identity to a book or an entry.

A resource that exists but belongs to someone else is reported exactly like
one that does not exist, so callers never learn about other users' data.
Entry creation is the one path that answers ``Forbidden`` instead of
``NotFound``.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers import BookDBHandler, EntryDBHandler
from app.errors import ForbiddenError, NotFoundError
from app.models import Book, Entry
from app.schemas import Identity
from app.utils.logger import setup_logger

logger = setup_logger("authorization")


def parse_id(value: str | uuid.UUID | None) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class AuthorizationGate:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.book_db_handler = BookDBHandler()
        self.entry_db_handler = EntryDBHandler()

    async def _find_owned_book(
        self, identity: Identity, book_id: str | uuid.UUID | None
    ) -> Book | None:
        book_uuid = parse_id(book_id)
        if book_uuid is None:
            return None
        book = await self.book_db_handler.get(book_uuid, db=self.db)
        if book is None:
            return None
        if str(book.user_id) != identity.id:
            logger.warning(
                f"User {identity.id} tried to access book {book_uuid} owned by someone else"
            )
            return None
        return book

    async def owned_book(self, identity: Identity, book_id: str | uuid.UUID | None) -> Book:
        """Book-scoped check used by get, update and delete."""
        book = await self._find_owned_book(identity, book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    async def book_for_new_entry(
        self, identity: Identity, book_id: str | uuid.UUID | None
    ) -> Book:
        """Same check as ``owned_book`` but reported as Forbidden."""
        book = await self._find_owned_book(identity, book_id)
        if book is None:
            raise ForbiddenError("Forbidden")
        return book

    async def owned_entry(
        self, identity: Identity, entry_id: str | uuid.UUID | None
    ) -> Entry:
        """Entry-scoped check, resolved through the parent book's owner."""
        entry_uuid = parse_id(entry_id)
        found = None
        if entry_uuid is not None:
            found = await self.entry_db_handler.get_entry_with_owner(
                entry_uuid, db=self.db
            )
        if found is None:
            raise NotFoundError("Entry not found")

        entry, owner_id = found
        if str(owner_id) != identity.id:
            logger.warning(
                f"User {identity.id} tried to access entry {entry_uuid} owned by someone else"
            )
            raise NotFoundError("Entry not found")
        return entry
