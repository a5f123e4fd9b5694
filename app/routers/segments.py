"""
Segments router - API endpoints for filter-based segments.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_auth_session, get_db, get_tenant_context
from app.models.list import ListType
from app.schemas.list import ListPage, ListRead, MemberPage, SegmentCreate, SegmentEdit, SegmentPermissions
from app.schemas.user import AuthSession
from app.services.membership_service import MembershipService
from app.services.segment_service import SegmentService
from app.services.tenant_service import TenantContext

router = APIRouter(prefix="/segments", tags=["segments"])


@router.get("", response_model=ListPage, response_model_by_alias=True)
async def list_segments(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.LIST_DEFAULT_PAGE_SIZE, ge=1, le=settings.LIST_MAX_PAGE_SIZE),
    search: Optional[str] = None,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """List segments with pagination and title search."""
    service = SegmentService(db)
    return await service.list_segments(tenant, page, per_page, search)


@router.post("", response_model=ListRead, status_code=status.HTTP_201_CREATED)
async def create_segment(
    data: SegmentCreate,
    session: AuthSession = Depends(get_auth_session),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Create a segment. Titles are unique per customer."""
    service = SegmentService(db)
    segment = await service.create_segment(tenant, session, data)
    await db.commit()
    return segment


@router.get("/permissions", response_model=SegmentPermissions)
async def get_permissions(
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    """Whether the caller may create, edit and delete segments."""
    service = SegmentService(db)
    return await service.get_edit_permissions(session)


@router.get("/{segment_id}", response_model=ListRead)
async def get_segment(
    segment_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a segment by ID."""
    service = SegmentService(db)
    return await service.get_segment(tenant, segment_id)


@router.put("/{segment_id}", response_model=ListRead)
async def edit_segment(
    segment_id: UUID,
    data: SegmentEdit,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace a segment's title and filters.

    Changed filters clear the segment's companies and reset status to 'new'.
    """
    service = SegmentService(db)
    segment = await service.edit_segment(tenant, segment_id, data)
    await db.commit()
    return segment


@router.delete("/{segment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_segment(
    segment_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a segment."""
    service = SegmentService(db)
    await service.delete_segment(tenant, segment_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{segment_id}/companies", response_model=MemberPage, response_model_by_alias=True)
async def list_segment_companies(
    segment_id: UUID,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.LIST_MEMBERS_DEFAULT_PAGE_SIZE, ge=1, le=settings.LIST_MAX_PAGE_SIZE),
    search: Optional[str] = None,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """List the companies computed for a segment."""
    service = MembershipService(db)
    return await service.list_members(tenant, ListType.SEGMENT, segment_id, page, per_page, search)


@router.delete("/{segment_id}/companies/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_segment_company(
    segment_id: UUID,
    company_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Remove a company from a segment."""
    service = MembershipService(db)
    await service.remove_member(tenant, ListType.SEGMENT, segment_id, company_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
