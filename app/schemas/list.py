"""
List and segment Pydantic schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.models.list import ListStatus, ListSubtype, ListType
from app.schemas.base import CustomerScopedRead, PageMeta
from app.schemas.filters import SegmentFilters


class ListCreate(BaseModel):
    """Schema for creating a list (list_type 'list'). Filters start empty."""

    name: str
    subtype: ListSubtype = ListSubtype.COMPANY
    is_static: bool = False
    description: Optional[str] = None


class ListUpdate(BaseModel):
    """Schema for updating a list. Only fields that are set get written."""

    name: Optional[str] = None
    description: Optional[str] = None
    filters: Optional[Dict[str, Any]] = None


class SegmentCreate(BaseModel):
    """Schema for creating a segment."""

    name: str
    filters: SegmentFilters


class SegmentEdit(BaseModel):
    """Schema for editing a segment's name and filters."""

    name: str
    filters: SegmentFilters


class ListRead(CustomerScopedRead):
    """Schema for reading list data (API response)."""

    list_id: UUID
    list_type: ListType
    name: str
    description: Optional[str] = None
    filters: Optional[Dict[str, Any]] = None
    user_id: Optional[UUID] = None
    status: ListStatus
    subtype: ListSubtype
    is_static: bool
    deleted_at: Optional[datetime] = None


class ListForDisplay(ListRead):
    """List row for collection pages, with its member count and owner."""

    company_count: int = 0
    owner_name: Optional[str] = None


class ListPage(BaseModel):
    data: List[ListForDisplay]
    meta: PageMeta


class MembershipRequest(BaseModel):
    """Company ids to add to or check against a list."""

    company_ids: List[Any]


class CompanySummary(BaseModel):
    """Company fields shown in a list's member table."""

    id: UUID
    company_id: UUID
    display_name: Optional[str] = None
    legal_name: Optional[str] = None
    logo: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    employees: Optional[int] = None
    categories: Optional[List[str]] = None
    website_url: Optional[str] = None
    domain: Optional[str] = None
    added_at: datetime


class MemberPage(BaseModel):
    data: List[CompanySummary]
    meta: PageMeta


class DuplicationRead(BaseModel):
    """Result of duplicating a list."""

    list: ListRead
    copied_count: int
    truncated: bool

    model_config = ConfigDict(from_attributes=True)


class SegmentPermissions(BaseModel):
    can_edit_segments: bool
