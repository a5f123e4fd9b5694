"""
List repository - database operations for List.

Every query is pinned to one list_type, skips soft-deleted rows and, when
the caller has a resolved customer, to that customer's rows.
"""

from typing import Any, Dict, List as ListType, Optional, Tuple
from uuid import UUID
import uuid

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import storage_errors
from app.models.list import List, ListStatus, ListType as ListKind
from app.services.tenant_service import TenantContext
from app.utils.search import LIKE_ESCAPE, contains_pattern
from app.utils.time import utc_now


class ListRepository:
    """Repository for List database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _scoped(self, tenant: TenantContext, kind: ListKind) -> Select:
        """Base query for live rows of one kind visible to the caller."""
        query = select(List).where(
            List.list_type == ListKind(kind).value,
            List.deleted_at.is_(None),
        )
        # A system admin with no selected customer is left unscoped
        if tenant.effective_customer_id is not None:
            query = query.where(List.customer_id == tenant.effective_customer_id)
        return query

    async def paginate(
        self,
        tenant: TenantContext,
        kind: ListKind,
        limit: int = 12,
        offset: int = 0,
        search: Optional[str] = None,
    ) -> Tuple[ListType[List], int]:
        """One page of rows, most recently updated first, plus the total count."""
        query = self._scoped(tenant, kind)

        term = search.strip() if search else ""
        if term:
            query = query.where(List.name.ilike(contains_pattern(term), escape=LIKE_ESCAPE))

        with storage_errors(f"fetch {ListKind(kind).value}s"):
            total = await self.db.scalar(
                select(func.count()).select_from(query.subquery())
            )
            result = await self.db.execute(
                query.order_by(List.updated_at.desc(), List.list_id.desc())
                .limit(limit)
                .offset(offset)
            )
            rows = list(result.scalars().all())
        return rows, total or 0

    async def get_by_id(
        self,
        tenant: TenantContext,
        kind: ListKind,
        list_id: UUID,
    ) -> Optional[List]:
        """Get a live row by ID under the caller's scope."""
        with storage_errors(f"fetch {ListKind(kind).value}"):
            result = await self.db.execute(
                self._scoped(tenant, kind).where(List.list_id == list_id)
            )
            return result.scalar_one_or_none()

    async def name_taken(
        self,
        customer_id: UUID,
        kind: ListKind,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        """Case-insensitive check for another live row with this name."""
        query = select(List.list_id).where(
            List.customer_id == customer_id,
            List.list_type == ListKind(kind).value,
            List.deleted_at.is_(None),
            func.lower(List.name) == name.lower(),
        )
        if exclude_id is not None:
            query = query.where(List.list_id != exclude_id)

        with storage_errors(f"check {ListKind(kind).value} name"):
            result = await self.db.execute(query.limit(1))
            return result.scalar_one_or_none() is not None

    async def create(
        self,
        customer_id: UUID,
        user_id: Optional[UUID],
        kind: ListKind,
        data: Dict[str, Any],
    ) -> List:
        """Create a new row with status 'new'."""
        now = utc_now()
        new_list = List(
            list_id=uuid.uuid4(),
            customer_id=customer_id,
            user_id=user_id,
            list_type=ListKind(kind).value,
            status=ListStatus.NEW.value,
            created_at=now,
            updated_at=now,
            **data,
        )
        with storage_errors(f"create {ListKind(kind).value}"):
            self.db.add(new_list)
            await self.db.flush()
            await self.db.refresh(new_list)
        return new_list

    async def update(
        self,
        tenant: TenantContext,
        kind: ListKind,
        list_id: UUID,
        values: Dict[str, Any],
    ) -> Optional[List]:
        """Update a row; updated_at is always stamped."""
        list_obj = await self.get_by_id(tenant, kind, list_id)
        if not list_obj:
            return None

        for field, value in values.items():
            setattr(list_obj, field, value)

        list_obj.updated_at = utc_now()
        with storage_errors(f"update {ListKind(kind).value}"):
            await self.db.flush()
            await self.db.refresh(list_obj)
        return list_obj

    async def soft_delete(
        self,
        tenant: TenantContext,
        kind: ListKind,
        list_id: UUID,
    ) -> bool:
        """Mark a live row deleted. False when nothing visible matched."""
        list_obj = await self.get_by_id(tenant, kind, list_id)
        if not list_obj:
            return False

        list_obj.deleted_at = utc_now()
        with storage_errors(f"delete {ListKind(kind).value}"):
            await self.db.flush()
        return True
