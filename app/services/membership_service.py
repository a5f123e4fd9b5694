"""
Membership business logic service.

Lists hold companies through list_companies rows. Every operation first
checks that the parent list is live and visible to the caller.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.errors import NotFound, UnsupportedOperation, ValidationError
from app.models.list import List as ListModel, ListSubtype, ListType
from app.repositories.list_repository import ListRepository
from app.repositories.membership_repository import MembershipRepository
from app.schemas.base import PageMeta
from app.schemas.list import CompanySummary, MemberPage
from app.services.tenant_service import TenantContext

logger = logging.getLogger(__name__)


def normalize_company_ids(values: Iterable[Any]) -> List[UUID]:
    """
    Keep string/UUID ids, drop blanks and duplicates, preserve order.

    A non-blank string that is not a UUID is a ValidationError.
    """
    seen = set()
    ids: List[UUID] = []
    for value in values or []:
        if isinstance(value, UUID):
            company_id = value
        elif isinstance(value, str) and value.strip():
            try:
                company_id = UUID(value.strip())
            except ValueError:
                raise ValidationError(f"Invalid company ID: {value}") from None
        else:
            continue
        if company_id not in seen:
            seen.add(company_id)
            ids.append(company_id)
    return ids


class MembershipService:
    """Service for list ↔ company membership."""

    def __init__(self, db: AsyncSession, chunk_size: Optional[int] = None):
        self.lists = ListRepository(db)
        self.repository = MembershipRepository(db)
        self.chunk_size = chunk_size or settings.ADD_MEMBERS_CHUNK_SIZE

    async def _visible_list(self, tenant: TenantContext, kind: ListType, list_id: UUID) -> ListModel:
        tenant.ensure_usable()
        list_obj = await self.lists.get_by_id(tenant, kind, list_id)
        if not list_obj:
            raise NotFound(f"{ListType(kind).label} not found")
        return list_obj

    async def add_members(self, tenant: TenantContext, list_id: UUID, company_ids: Iterable[Any]) -> None:
        """Add companies to a company list. Companies already present are skipped."""
        ids = normalize_company_ids(company_ids)
        if not ids:
            raise ValidationError("No valid company IDs provided")

        list_obj = await self._visible_list(tenant, ListType.LIST, list_id)
        if list_obj.subtype != ListSubtype.COMPANY.value:
            raise UnsupportedOperation("Only company lists can have companies added")

        for start in range(0, len(ids), self.chunk_size):
            await self.repository.add_ignore_duplicates(list_id, ids[start:start + self.chunk_size])
        logger.info("Added %d companies to list %s", len(ids), list_id)

    async def check_membership(
        self,
        tenant: TenantContext,
        list_id: UUID,
        company_ids: Iterable[Any],
    ) -> Dict[str, bool]:
        """Map each company id to whether it is already in the list."""
        ids = normalize_company_ids(company_ids)
        if not ids:
            return {}

        await self._visible_list(tenant, ListType.LIST, list_id)
        present = await self.repository.existing_company_ids(list_id, ids)
        return {str(company_id): company_id in present for company_id in ids}

    async def remove_member(
        self,
        tenant: TenantContext,
        kind: ListType,
        list_id: UUID,
        company_id: UUID,
    ) -> None:
        """Remove one company. Removing an absent company is not an error."""
        await self._visible_list(tenant, kind, list_id)
        await self.repository.remove(list_id, company_id)

    async def list_members(
        self,
        tenant: TenantContext,
        kind: ListType,
        list_id: UUID,
        page: int = 1,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
    ) -> MemberPage:
        """Paginated companies of a list, most recently added first."""
        if per_page is None:
            per_page = settings.LIST_MEMBERS_DEFAULT_PAGE_SIZE
        if page < 1 or per_page < 1:
            raise ValidationError("page and per_page must be positive integers")

        await self._visible_list(tenant, kind, list_id)
        rows, total = await self.repository.page_companies(
            list_id,
            limit=per_page,
            offset=(page - 1) * per_page,
            search=search,
        )

        data = [
            CompanySummary(
                id=membership.id,
                company_id=company.company_id,
                display_name=company.display_name,
                legal_name=company.legal_name,
                logo=company.logo,
                country=company.country,
                region=company.region,
                employees=company.employees,
                categories=company.categories,
                website_url=company.website_url,
                domain=company.domain,
                added_at=membership.created_at,
            )
            for membership, company in rows
        ]
        return MemberPage(data=data, meta=PageMeta.build(total, page, per_page))

    async def count_members(self, list_id: UUID) -> int:
        """Companies in one list. Callers handle StorageError."""
        return await self.repository.count_members(list_id)
