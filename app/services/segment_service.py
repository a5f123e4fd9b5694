"""
Segment business logic service.

Segments are lists with list_type 'segment' whose membership is computed
from their filters by an external processor. Changing the filters
invalidates the computed membership.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import can_edit_segments
from app.errors import Conflict, storage_errors
from app.models.list import List, ListStatus, ListSubtype, ListType
from app.repositories.membership_repository import MembershipRepository
from app.repositories.user_repository import UserRepository
from app.schemas.list import ListPage, SegmentCreate, SegmentEdit, SegmentPermissions
from app.schemas.user import AuthSession
from app.services.list_service import ListService, validate_name
from app.services.tenant_service import TenantContext

logger = logging.getLogger(__name__)

DUPLICATE_TITLE_MESSAGE = "A segment with this title already exists. Please choose a different title."


class SegmentService:
    """Service for segment business logic."""

    def __init__(self, db: AsyncSession):
        self.lists = ListService(db)
        self.repository = self.lists.repository
        self.memberships = MembershipRepository(db)
        self.users = UserRepository(db)

    async def list_segments(
        self,
        tenant: TenantContext,
        page: int = 1,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
    ) -> ListPage:
        return await self.lists.list_collection(tenant, ListType.SEGMENT, page, per_page, search)

    async def get_segment(self, tenant: TenantContext, segment_id: UUID) -> List:
        return await self.lists.get(tenant, ListType.SEGMENT, segment_id)

    async def delete_segment(self, tenant: TenantContext, segment_id: UUID) -> None:
        await self.lists.soft_delete(tenant, ListType.SEGMENT, segment_id)

    async def create_segment(
        self,
        tenant: TenantContext,
        session: AuthSession,
        data: SegmentCreate,
    ) -> List:
        """
        Create a segment from a title and filters.

        Titles are unique per customer, case-insensitively. The new segment
        starts in status 'new' so the processor picks it up.
        """
        customer_id = tenant.require_customer("create segment")
        name = validate_name(ListType.SEGMENT, data.name)

        if await self.repository.name_taken(customer_id, ListType.SEGMENT, name):
            raise Conflict(DUPLICATE_TITLE_MESSAGE)

        segment = await self.lists.create(
            tenant,
            session,
            ListType.SEGMENT,
            {
                "name": name,
                "filters": data.filters,
                "subtype": ListSubtype.COMPANY,
                "is_static": False,
            },
        )
        logger.info("Created segment %s for customer %s", segment.list_id, customer_id)
        return segment

    async def edit_segment(
        self,
        tenant: TenantContext,
        segment_id: UUID,
        data: SegmentEdit,
    ) -> List:
        """
        Rename a segment and replace its filters.

        When the filters differ from the stored ones the computed companies
        are discarded and status goes back to 'new'.
        """
        customer_id = tenant.require_customer("edit segment")
        name = validate_name(ListType.SEGMENT, data.name)
        segment = await self.lists.get(tenant, ListType.SEGMENT, segment_id)

        if await self.repository.name_taken(customer_id, ListType.SEGMENT, name, exclude_id=segment_id):
            raise Conflict(DUPLICATE_TITLE_MESSAGE)

        filters = data.filters.to_payload()
        values = {"name": name, "filters": filters}
        if (segment.filters or {}) != filters:
            removed = await self.memberships.clear(segment_id)
            values["status"] = ListStatus.NEW.value
            logger.info("Filters changed on segment %s, cleared %d companies", segment_id, removed)

        return await self.lists.update(tenant, ListType.SEGMENT, segment_id, values)

    async def get_edit_permissions(self, session: AuthSession) -> SegmentPermissions:
        """Whether the caller may create, edit and delete segments."""
        with storage_errors("check segment permissions"):
            is_admin = await self.users.is_system_admin(session.auth_user_id)
            is_customer_success = await self.users.is_customer_success(session.auth_user_id)
        return SegmentPermissions(can_edit_segments=can_edit_segments(is_admin, is_customer_success))
