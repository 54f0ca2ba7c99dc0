from app.db_handlers.base import BaseDBHandler, transactional
from app.db_handlers.book import BookDBHandler
from app.db_handlers.entry import EntryDBHandler
from app.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "transactional",
    "UserDBHandler",
    "BookDBHandler",
    "EntryDBHandler",
]
