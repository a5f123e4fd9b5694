"""
Membership repository - database operations for ListCompany.

Callers are responsible for checking the parent list is visible to the
current customer before touching its membership rows.
"""

from typing import List, Optional, Sequence, Set, Tuple
from uuid import UUID
import uuid

from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import storage_errors
from app.models.company import Company
from app.models.list_company import ListCompany
from app.utils.search import LIKE_ESCAPE, contains_pattern
from app.utils.time import utc_now


class MembershipRepository:
    """Repository for list ↔ company membership rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self):
        dialect = self.db.bind.dialect.name if self.db.bind is not None else "postgresql"
        return sqlite_insert if dialect == "sqlite" else pg_insert

    async def count_members(self, list_id: UUID) -> int:
        """Number of companies in one list."""
        with storage_errors("count companies"):
            total = await self.db.scalar(
                select(func.count())
                .select_from(ListCompany)
                .where(ListCompany.list_id == list_id)
            )
        return total or 0

    async def list_member_ids(self, list_id: UUID, limit: int, offset: int = 0) -> List[UUID]:
        """A stable page of company ids, oldest membership first."""
        with storage_errors("fetch list companies"):
            result = await self.db.execute(
                select(ListCompany.company_id)
                .where(ListCompany.list_id == list_id)
                .order_by(ListCompany.created_at.asc(), ListCompany.id.asc())
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars().all())

    async def add_ignore_duplicates(self, list_id: UUID, company_ids: Sequence[UUID]) -> None:
        """Insert memberships; pairs already present are skipped silently."""
        if not company_ids:
            return
        now = utc_now()
        records = [
            {"id": uuid.uuid4(), "list_id": list_id, "company_id": company_id, "created_at": now}
            for company_id in company_ids
        ]
        stmt = self._insert()(ListCompany).values(records).on_conflict_do_nothing(
            index_elements=[ListCompany.company_id, ListCompany.list_id]
        )
        with storage_errors("add companies to list"):
            await self.db.execute(stmt)

    async def existing_company_ids(self, list_id: UUID, company_ids: Sequence[UUID]) -> Set[UUID]:
        """Subset of company_ids already in the list."""
        if not company_ids:
            return set()
        with storage_errors("check companies in list"):
            result = await self.db.execute(
                select(ListCompany.company_id).where(
                    ListCompany.list_id == list_id,
                    ListCompany.company_id.in_(list(company_ids)),
                )
            )
            return set(result.scalars().all())

    async def remove(self, list_id: UUID, company_id: UUID) -> int:
        """Delete one membership row. Returns rows removed."""
        with storage_errors("remove company from list"):
            result = await self.db.execute(
                delete(ListCompany).where(
                    ListCompany.list_id == list_id,
                    ListCompany.company_id == company_id,
                )
            )
        return result.rowcount or 0

    async def clear(self, list_id: UUID) -> int:
        """Delete every membership row of a list."""
        with storage_errors("clear list companies"):
            result = await self.db.execute(
                delete(ListCompany).where(ListCompany.list_id == list_id)
            )
        return result.rowcount or 0

    async def page_companies(
        self,
        list_id: UUID,
        limit: int,
        offset: int = 0,
        search: Optional[str] = None,
    ) -> Tuple[List[Tuple[ListCompany, Company]], int]:
        """Member companies with their membership rows, newest first."""
        query = (
            select(ListCompany, Company)
            .join(Company, Company.company_id == ListCompany.company_id)
            .where(ListCompany.list_id == list_id)
        )

        term = search.strip() if search else ""
        if term:
            pattern = contains_pattern(term)
            query = query.where(
                or_(
                    Company.display_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Company.legal_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Company.domain.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        with storage_errors("fetch companies"):
            total = await self.db.scalar(
                select(func.count()).select_from(query.subquery())
            )
            result = await self.db.execute(
                query.order_by(ListCompany.created_at.desc(), ListCompany.id.desc())
                .limit(limit)
                .offset(offset)
            )
            rows = [(row[0], row[1]) for row in result.all()]
        return rows, total or 0

