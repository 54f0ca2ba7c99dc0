"""
Database models for Shadow Ledger.

Architecture: User → Book → Entry ownership chain.
"""

from app.models.book import EMPTY_GRID, Book, DocumentType
from app.models.entry import Entry, EntryType
from app.models.user import User

__all__ = [
    "User",
    "Book",
    "Entry",
    "DocumentType",
    "EntryType",
    "EMPTY_GRID",
]
