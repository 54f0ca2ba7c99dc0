"""
Base configurations and mixins for database models.

This module provides the foundation for all database models in Shadow Ledger:
the declarative base with dictionary serialization, and the mixins that give
every table a UUID primary key and a creation timestamp.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Uuid, inspect
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.functions import now as db_now


def utc_now() -> datetime:
    return datetime.now(UTC)


class CustomBase:
    """
    Custom base class for SQLAlchemy models with enhanced serialization.

    ``to_dict`` converts model instances to plain dictionaries, rendering
    UUIDs as strings and datetimes in ISO format so they can go straight
    into a JSON response.
    """

    def to_dict(self) -> dict:
        d = {}
        if not self:
            return d
        for column in inspect(self).mapper.column_attrs:
            value = getattr(self, column.key)
            if isinstance(value, uuid.UUID):
                d[column.key] = str(value)
            elif isinstance(value, datetime):
                d[column.key] = value.isoformat()
            else:
                d[column.key] = value
        return d


Base = declarative_base(cls=CustomBase)


class CreatedAtMixin:
    """
    Adds an immutable ``created_at`` column.

    The value is set in Python so rows created within the same second still
    order correctly; the server default covers rows inserted by hand.
    """

    created_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )


class UUIDMixin:
    """
    Mixin class that adds UUID primary key to models.

    The UUID is generated with uuid4() when the row is created. ``Uuid`` maps
    to the native type on PostgreSQL and to CHAR(32) on SQLite.
    """

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


__all__ = ["Base", "CreatedAtMixin", "UUIDMixin", "utc_now"]
