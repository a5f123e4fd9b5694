"""
ListCompany model.

Associates a company with a list. Unique on (company_id, list_id).
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.utils.time import utc_now


class ListCompany(Base):
    """
    list_companies table - membership rows for static company lists
    and processor-filled segments.
    """

    __tablename__ = "list_companies"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("companies.company_id", ondelete="CASCADE"),
        nullable=False,
    )

    list_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("lists.list_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        UniqueConstraint("company_id", "list_id", name="list_companies_unique"),
    )
