"""
List business logic service.

Shared by lists and segments; ``kind`` picks the list_type every query is
pinned to.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.errors import NotAuthenticated, NotFound, StorageError, ValidationError
from app.models.list import List, ListSubtype, ListType
from app.repositories.list_repository import ListRepository
from app.repositories.user_repository import UserRepository
from app.schemas.base import PageMeta
from app.schemas.filters import SegmentFilters
from app.schemas.list import ListForDisplay, ListPage
from app.schemas.user import AuthSession
from app.services.membership_service import MembershipService
from app.services.tenant_service import TenantContext

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100

Payload = Union[BaseModel, Mapping[str, Any]]


def validate_name(kind: ListType, name: Optional[str]) -> str:
    """Trim a name and check its length. Returns the trimmed value."""
    trimmed = (name or "").strip()
    if not NAME_MIN_LENGTH <= len(trimmed) <= NAME_MAX_LENGTH:
        raise ValidationError(
            f"{ListType(kind).label} name must be between "
            f"{NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
        )
    return trimmed


def _as_dict(data: Payload, exclude_unset: bool = False) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=exclude_unset)
    return dict(data)


def _filters_payload(filters: Any) -> Dict[str, Any]:
    if isinstance(filters, SegmentFilters):
        return filters.to_payload()
    return dict(filters or {})


class ListService:
    """Service for list and segment rows."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = ListRepository(db)
        self.users = UserRepository(db)
        self.memberships = MembershipService(db)

    async def list_collection(
        self,
        tenant: TenantContext,
        kind: ListType,
        page: int = 1,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
    ) -> ListPage:
        """
        One page of rows with pagination metadata.

        Each row carries its company count and owner name. A failed count
        is reported as 0 rather than failing the page.
        """
        tenant.ensure_usable()
        if per_page is None:
            per_page = settings.LIST_DEFAULT_PAGE_SIZE
        if page < 1 or per_page < 1:
            raise ValidationError("page and per_page must be positive integers")

        rows, total = await self.repository.paginate(
            tenant,
            kind,
            limit=per_page,
            offset=(page - 1) * per_page,
            search=search,
        )

        owners = await self._owner_names(rows)
        data = []
        for row in rows:
            item = ListForDisplay.model_validate(row)
            item.company_count = await self._safe_count(row.list_id)
            item.owner_name = owners.get(row.user_id) if row.user_id else None
            data.append(item)

        return ListPage(data=data, meta=PageMeta.build(total, page, per_page))

    async def _safe_count(self, list_id: UUID) -> int:
        try:
            async with self.db.begin_nested():
                return await self.memberships.count_members(list_id)
        except StorageError as exc:
            logger.warning("Could not count companies for list %s: %s", list_id, exc)
            return 0

    async def _owner_names(self, rows) -> Dict[UUID, Optional[str]]:
        try:
            return await self.users.get_full_names(row.user_id for row in rows)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to fetch list owners: {exc}") from exc

    async def get(self, tenant: TenantContext, kind: ListType, list_id: UUID) -> List:
        """Get a live row by ID, or raise NotFound."""
        tenant.ensure_usable()
        list_obj = await self.repository.get_by_id(tenant, kind, list_id)
        if not list_obj:
            raise NotFound(f"{ListType(kind).label} not found")
        return list_obj

    async def create(
        self,
        tenant: TenantContext,
        session: AuthSession,
        kind: ListType,
        data: Payload,
    ) -> List:
        """Create a row owned by the caller's application user."""
        customer_id = tenant.require_customer(f"create {ListType(kind).value}")
        user_id = await self._resolve_user_id(session)

        values = _as_dict(data)
        name = validate_name(kind, values.get("name"))

        return await self.repository.create(
            customer_id,
            user_id,
            kind,
            {
                "name": name,
                "description": values.get("description"),
                "filters": _filters_payload(values.get("filters")),
                "subtype": ListSubtype(values.get("subtype") or ListSubtype.COMPANY).value,
                "is_static": bool(values.get("is_static", False)),
            },
        )

    async def _resolve_user_id(self, session: AuthSession) -> UUID:
        try:
            user = await self.users.get_by_auth_user_id(session.auth_user_id)
        except SQLAlchemyError as exc:
            raise NotAuthenticated(f"Unable to resolve application user: {exc}") from exc
        if not user:
            raise NotAuthenticated(
                f"Unable to resolve application user: no user for {session.auth_user_id}"
            )
        return user.user_id

    async def update(
        self,
        tenant: TenantContext,
        kind: ListType,
        list_id: UUID,
        patch: Payload,
    ) -> List:
        """Apply the set fields of patch. updated_at is stamped even for an empty patch."""
        tenant.ensure_usable()
        values = _as_dict(patch, exclude_unset=True)

        if "name" in values:
            if values["name"] is None:
                values.pop("name")
            else:
                values["name"] = validate_name(kind, values["name"])
        if "filters" in values:
            values["filters"] = _filters_payload(values["filters"])

        list_obj = await self.repository.update(tenant, kind, list_id, values)
        if not list_obj:
            raise NotFound(f"{ListType(kind).label} not found")
        return list_obj

    async def soft_delete(self, tenant: TenantContext, kind: ListType, list_id: UUID) -> None:
        """Mark a row deleted. Deleting twice is a NotFound."""
        tenant.ensure_usable()
        deleted = await self.repository.soft_delete(tenant, kind, list_id)
        if not deleted:
            raise NotFound(f"{ListType(kind).label} not found")
        logger.info("Soft-deleted %s %s", ListType(kind).value, list_id)
