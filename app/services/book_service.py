"""
Book service: create, list, read, update and delete a user's books.

Profile and spreadsheet books share one table; this module is where the
document type decides what ``content`` may hold and whether entries are
attached when a book is read.
"""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers import BookDBHandler, transactional
from app.errors import InvalidInputError
from app.models import EMPTY_GRID, Book, DocumentType
from app.schemas import Identity
from app.services.authorization import AuthorizationGate, parse_id
from app.utils.logger import setup_logger

logger = setup_logger("book_service")


def parse_document_type(value: Any) -> DocumentType:
    try:
        return DocumentType(value)
    except ValueError as e:
        raise InvalidInputError(
            "Type must be one of: " + ", ".join(t.value for t in DocumentType)
        ) from e


def serialize_grid(content: Any) -> str:
    """
    Validate spreadsheet content and return its canonical serialized form.

    ``content`` is either the JSON text of the grid or the grid itself. A grid
    is a list of rows, every row a list of string cells, all rows of the same
    length.
    """
    grid = content
    if isinstance(content, str):
        try:
            grid = json.loads(content)
        except json.JSONDecodeError as e:
            raise InvalidInputError("Spreadsheet content is not valid JSON") from e

    if not isinstance(grid, list):
        raise InvalidInputError("Spreadsheet content must be a list of rows")

    width = None
    for row in grid:
        if not isinstance(row, list) or not all(isinstance(cell, str) for cell in row):
            raise InvalidInputError("Each spreadsheet row must be a list of strings")
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise InvalidInputError("Spreadsheet rows must all have the same length")

    return json.dumps(grid, ensure_ascii=False)


class BookService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.book_db_handler = BookDBHandler()
        self.gate = AuthorizationGate(db)

    async def list_books(self, identity: Identity) -> list[Book]:
        return await self.book_db_handler.get_books_by_owner(
            self._owner_uuid(identity), db=self.db
        )

    @transactional
    async def create_book(
        self, identity: Identity, title: str | None, document_type: str | None
    ) -> Book:
        if not title or not title.strip() or not document_type:
            raise InvalidInputError("Title and type required")
        doc_type = parse_document_type(document_type)

        book = await self.book_db_handler.create(
            {
                "user_id": self._owner_uuid(identity),
                "title": title,
                "type": doc_type.value,
                "content": EMPTY_GRID if doc_type is DocumentType.SPREADSHEET else None,
            },
            db=self.db,
        )
        logger.info(f"Created {doc_type.value} book {book.id} for user {identity.id}")
        return book

    async def get_book(self, identity: Identity, book_id: str) -> dict[str, Any]:
        """
        Return the book as a dict. Profile books also carry an ``entries`` list
        with every entry of the book, oldest first.
        """
        book = await self.gate.owned_book(identity, book_id)
        detail = book.to_dict()

        if book.document_type is DocumentType.PROFILE:
            entries = await self.book_db_handler.get_entries(book.id, db=self.db)
            detail["entries"] = [entry.to_dict() for entry in entries]

        return detail

    @transactional
    async def update_book(
        self,
        identity: Identity,
        book_id: str,
        title: str | None = None,
        content: Any = None,
    ) -> Book:
        """
        Replace the fields that were given and leave the others alone. ``None``
        means "not given", so a field cannot be cleared through this call.
        """
        book = await self.gate.owned_book(identity, book_id)

        update_data: dict[str, Any] = {}
        if title is not None:
            if not title.strip():
                raise InvalidInputError("Title cannot be empty")
            update_data["title"] = title

        if content is not None:
            if book.document_type is not DocumentType.SPREADSHEET:
                raise InvalidInputError("Profile books have no content to update")
            update_data["content"] = serialize_grid(content)

        if not update_data:
            return book

        book = await self.book_db_handler.update(book, update_data, db=self.db)
        logger.info(f"Updated book {book.id} fields: {sorted(update_data)}")
        return book

    @transactional
    async def delete_book(self, identity: Identity, book_id: str) -> None:
        book = await self.gate.owned_book(identity, book_id)
        book_uuid = book.id
        removed_entries = await self.book_db_handler.delete_with_entries(
            book_uuid, db=self.db
        )
        logger.info(f"Deleted book {book_uuid} and {removed_entries} entries")

    @staticmethod
    def _owner_uuid(identity: Identity):
        return parse_id(identity.id)
