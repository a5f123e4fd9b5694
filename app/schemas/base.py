"""
Base Pydantic schemas with common fields.

These are templates that other schemas inherit from.
"""

import math
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CustomerScopedRead(BaseModel):
    """
    Base schema for reading customer-scoped data.

    Includes the auto-generated fields like timestamps.
    """

    customer_id: UUID
    created_at: datetime
    updated_at: datetime

    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)


class PageMeta(BaseModel):
    """
    Pagination metadata.

    Serialized in camelCase (perPage, lastPage) for the UI.
    """

    total: int
    page: int
    per_page: int
    last_page: int
    prev: Optional[int] = None
    next: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def build(cls, total: int, page: int, per_page: int) -> "PageMeta":
        """Compute page boundaries: last_page = ceil(total / per_page)."""
        last_page = math.ceil(total / per_page) if per_page else 0
        return cls(
            total=total,
            page=page,
            per_page=per_page,
            last_page=last_page,
            prev=page - 1 if page > 1 else None,
            next=page + 1 if page < last_page else None,
        )
