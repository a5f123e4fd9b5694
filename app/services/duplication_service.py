"""
List duplication.

Copies a list's attributes and filters, then, for static company lists,
its companies. The company copy is best effort: if reading a page of the
source's companies fails, whatever was read so far is copied and the
result is flagged as truncated.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.errors import StorageError
from app.models.list import List as ListModel, ListSubtype, ListType
from app.repositories.membership_repository import MembershipRepository
from app.schemas.user import AuthSession
from app.services.list_service import NAME_MAX_LENGTH, NAME_MIN_LENGTH, ListService
from app.services.membership_service import MembershipService
from app.services.tenant_service import TenantContext

logger = logging.getLogger(__name__)

FALLBACK_COPY_NAME = "List copy"


@dataclass
class DuplicationResult:
    list: ListModel
    copied_count: int = 0
    truncated: bool = False


def derive_copy_name(name: Optional[str]) -> str:
    """Name for a copy: '<name>_copy', shortened to fit the name limits."""
    base = (name or "").strip()
    copy_name = f"{base}_copy" if base else FALLBACK_COPY_NAME
    if len(copy_name) > NAME_MAX_LENGTH:
        copy_name = copy_name[:NAME_MAX_LENGTH - 3] + "..."
    if len(copy_name) < NAME_MIN_LENGTH:
        copy_name = FALLBACK_COPY_NAME
    return copy_name


class DuplicationService:
    """Service for duplicating lists."""

    def __init__(
        self,
        db: AsyncSession,
        page_size: Optional[int] = None,
        chunk_size: Optional[int] = None,
    ):
        self.db = db
        self.lists = ListService(db)
        self.memberships = MembershipService(db)
        self.repository = MembershipRepository(db)
        self.page_size = page_size or settings.DUPLICATE_MEMBERS_PAGE_SIZE
        self.chunk_size = chunk_size or settings.ADD_MEMBERS_CHUNK_SIZE

    async def duplicate_list(
        self,
        tenant: TenantContext,
        session: AuthSession,
        list_id: UUID,
    ) -> DuplicationResult:
        source = await self.lists.get(tenant, ListType.LIST, list_id)

        copy = await self.lists.create(
            tenant,
            session,
            ListType.LIST,
            {
                "name": derive_copy_name(source.name),
                "description": source.description,
                "subtype": source.subtype,
                "is_static": source.is_static,
            },
        )
        if source.filters:
            copy = await self.lists.update(tenant, ListType.LIST, copy.list_id, {"filters": source.filters})

        result = DuplicationResult(list=copy)
        if not (source.is_static and source.subtype == ListSubtype.COMPANY.value):
            return result

        company_ids, result.truncated = await self._read_member_ids(source.list_id)
        for start in range(0, len(company_ids), self.chunk_size):
            chunk = company_ids[start:start + self.chunk_size]
            await self.memberships.add_members(tenant, copy.list_id, chunk)
        result.copied_count = len(company_ids)

        logger.info(
            "Duplicated list %s as %s (%d companies, truncated=%s)",
            source.list_id,
            copy.list_id,
            result.copied_count,
            result.truncated,
        )
        return result

    async def _read_member_ids(self, list_id: UUID):
        """All company ids of a list, page by page. Stops at the first failed page."""
        company_ids: List[UUID] = []
        offset = 0
        while True:
            try:
                async with self.db.begin_nested():
                    page = await self.repository.list_member_ids(list_id, self.page_size, offset)
            except StorageError as exc:
                logger.warning(
                    "Stopped copying companies of list %s after %d: %s",
                    list_id,
                    len(company_ids),
                    exc,
                )
                return company_ids, True

            company_ids.extend(page)
            if len(page) < self.page_size:
                return company_ids, False
            offset += self.page_size
