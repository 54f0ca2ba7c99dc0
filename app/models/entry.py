"""
Entry model: one tagged line of text inside a profile book.

Entries are immutable once written; they go away either individually or when
their parent book is deleted.
"""

import enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.models.base import Base, CreatedAtMixin, UUIDMixin


class EntryType(str, enum.Enum):
    TRAIT = "trait"
    WEAKNESS = "weakness"
    SECRET = "secret"
    FEATURE = "feature"


class Entry(Base, UUIDMixin, CreatedAtMixin):
    __tablename__ = "entries"
    __table_args__ = (
        Index("ix_entries_book_id", "book_id"),
        CheckConstraint(
            "type IN ('trait', 'weakness', 'secret', 'feature')",
            name="ck_entries_type",
        ),
    )

    book_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
    )

    type = Column(String(20), nullable=False, comment="trait, weakness, secret or feature")

    content = Column(Text, nullable=False)

    book = relationship("Book", back_populates="entries")

    def __repr__(self):
        return f"<Entry(id={self.id}, book_id={self.book_id}, type='{self.type}')>"
