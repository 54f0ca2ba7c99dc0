"""
Entry service: add tagged lines to a profile book and remove them.

Entries have no update operation; they are written once and deleted either
one at a time or together with their book.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers import EntryDBHandler, transactional
from app.errors import ForbiddenError, InvalidInputError
from app.models import Entry, EntryType
from app.schemas import Identity
from app.services.authorization import AuthorizationGate
from app.utils.logger import setup_logger

logger = setup_logger("entry_service")


def parse_entry_type(value: Any) -> EntryType:
    try:
        return EntryType(value)
    except ValueError as e:
        raise InvalidInputError(
            "Type must be one of: " + ", ".join(t.value for t in EntryType)
        ) from e


class EntryService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.entry_db_handler = EntryDBHandler()
        self.gate = AuthorizationGate(db)

    @transactional
    async def create_entry(
        self,
        identity: Identity,
        book_id: str | None,
        entry_type: str | None,
        content: str | None,
    ) -> Entry:
        if not book_id or not entry_type or not content or not content.strip():
            raise InvalidInputError("Book, type and content required")
        parsed_type = parse_entry_type(entry_type)

        # Spreadsheet books are accepted here too; nothing reads their entries
        book = await self.gate.book_for_new_entry(identity, book_id)
        book_uuid = book.id

        try:
            entry = await self.entry_db_handler.create(
                {"book_id": book_uuid, "type": parsed_type.value, "content": content},
                db=self.db,
            )
        except IntegrityError as e:
            # The book was deleted between the ownership check and the insert
            raise ForbiddenError("Forbidden") from e
        logger.info(f"Added {parsed_type.value} entry {entry.id} to book {book_uuid}")
        return entry

    @transactional
    async def delete_entry(self, identity: Identity, entry_id: str) -> None:
        entry = await self.gate.owned_entry(identity, entry_id)
        entry_uuid, book_uuid = entry.id, entry.book_id
        await self.entry_db_handler.remove(entry_uuid, db=self.db)
        logger.info(f"Deleted entry {entry_uuid} from book {book_uuid}")
