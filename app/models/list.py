"""
List model.

Lists, segments and territories share this table and are told apart
by list_type.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import JSONType, TimestampedModel


class ListType(str, Enum):
    SEGMENT = "segment"
    TERRITORY = "territory"
    LIST = "list"

    @property
    def label(self) -> str:
        """Capitalized name for user-facing messages."""
        return self.value.capitalize()


class ListSubtype(str, Enum):
    PEOPLE = "people"
    COMPANY = "company"


class ListStatus(str, Enum):
    NEW = "new"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class List(TimestampedModel):
    """
    Lists table.

    Rows are never hard-deleted; deleted_at marks a row as gone for
    every read and write path.
    """

    __tablename__ = "lists"

    list_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.customer_id", ondelete="CASCADE"),
        nullable=False,
    )

    list_type: Mapped[str] = mapped_column(String(20), nullable=False)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    filters: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ListStatus.NEW.value,
    )

    subtype: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ListSubtype.COMPANY.value,
    )

    is_static: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_lists_customer_type_updated", "customer_id", "list_type", "updated_at"),
    )
