"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.base import CustomerScopedRead, PageMeta
from app.schemas.filters import SegmentFilters
from app.schemas.list import (
    CompanySummary,
    DuplicationRead,
    ListCreate,
    ListForDisplay,
    ListPage,
    ListRead,
    ListUpdate,
    MemberPage,
    MembershipRequest,
    SegmentCreate,
    SegmentEdit,
    SegmentPermissions,
)
from app.schemas.user import AuthSession

__all__ = [
    "CustomerScopedRead",
    "PageMeta",
    "SegmentFilters",
    "CompanySummary",
    "DuplicationRead",
    "ListCreate",
    "ListForDisplay",
    "ListPage",
    "ListRead",
    "ListUpdate",
    "MemberPage",
    "MembershipRequest",
    "SegmentCreate",
    "SegmentEdit",
    "SegmentPermissions",
    "AuthSession",
]
