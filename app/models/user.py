"""
User model for authentication and book ownership.

Architecture:
    User → Book → Entry

Users are created once at signup and never updated or deleted by the API.
"""

from sqlalchemy import Column, Index, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base, CreatedAtMixin, UUIDMixin


class User(Base, UUIDMixin, CreatedAtMixin):
    """Registered account owning a set of books."""

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_username", "username", unique=True),)

    username = Column(
        Text,
        nullable=False,
        comment="Unique, case-sensitive login name",
    )

    password_hash = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hash of the password",
    )

    books = relationship(
        "Book",
        back_populates="owner",
        passive_deletes=True,
        doc="Books owned by this user",
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
