"""
Book model: a user-owned document that is either a profile or a spreadsheet.

Both shapes share one table. ``type`` decides what ``content`` means:

- profile: ``content`` is always NULL, the document body lives in ``entries``.
- spreadsheet: ``content`` is a JSON-serialized grid (list of rows of string
  cells), ``"[]"`` when the book is created.
"""

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql.functions import now as db_now

from app.models.base import Base, CreatedAtMixin, UUIDMixin, utc_now


class DocumentType(str, enum.Enum):
    PROFILE = "profile"
    SPREADSHEET = "spreadsheet"


EMPTY_GRID = "[]"


class Book(Base, UUIDMixin, CreatedAtMixin):
    """A profile or spreadsheet document owned by exactly one user."""

    __tablename__ = "books"
    __table_args__ = (
        Index("ix_books_user_id_created_at", "user_id", "created_at"),
        CheckConstraint(
            "type IN ('profile', 'spreadsheet')", name="ck_books_type"
        ),
    )

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        comment="Owner of the book; never changes",
    )

    title = Column(Text, nullable=False)

    type = Column(
        String(20),
        nullable=False,
        comment="Document type: profile or spreadsheet, fixed at creation",
    )

    content = Column(
        Text,
        nullable=True,
        comment="Serialized spreadsheet grid; NULL for profile books",
    )

    updated_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        server_default=db_now(),
        nullable=False,
    )

    owner = relationship("User", back_populates="books")

    entries = relationship(
        "Entry",
        back_populates="book",
        order_by="Entry.created_at",
        passive_deletes=True,
        doc="Tagged entries of a profile book",
    )

    @property
    def document_type(self) -> DocumentType:
        return DocumentType(self.type)

    def __repr__(self):
        return f"<Book(id={self.id}, type='{self.type}', title='{self.title}')>"
