"""
Lists router - API endpoints for company lists and their companies.
"""

from typing import Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_auth_session, get_db, get_tenant_context
from app.models.list import ListType
from app.schemas.list import (
    DuplicationRead,
    ListCreate,
    ListPage,
    ListRead,
    ListUpdate,
    MemberPage,
    MembershipRequest,
)
from app.schemas.user import AuthSession
from app.services.duplication_service import DuplicationService
from app.services.list_service import ListService
from app.services.membership_service import MembershipService
from app.services.tenant_service import TenantContext

router = APIRouter(prefix="/lists", tags=["lists"])


@router.get("", response_model=ListPage, response_model_by_alias=True)
async def list_lists(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.LIST_DEFAULT_PAGE_SIZE, ge=1, le=settings.LIST_MAX_PAGE_SIZE),
    search: Optional[str] = None,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    List the caller's lists, most recently updated first.

    Each row includes company_count and owner_name.
    """
    service = ListService(db)
    return await service.list_collection(tenant, ListType.LIST, page, per_page, search)


@router.post("", response_model=ListRead, status_code=status.HTTP_201_CREATED)
async def create_list(
    data: ListCreate,
    session: AuthSession = Depends(get_auth_session),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Create a new list."""
    service = ListService(db)
    list_obj = await service.create(tenant, session, ListType.LIST, data)
    await db.commit()
    return list_obj


@router.get("/{list_id}", response_model=ListRead)
async def get_list(
    list_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a list by ID."""
    service = ListService(db)
    return await service.get(tenant, ListType.LIST, list_id)


@router.patch("/{list_id}", response_model=ListRead)
async def update_list(
    list_id: UUID,
    data: ListUpdate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Update a list's name, description or filters."""
    service = ListService(db)
    list_obj = await service.update(tenant, ListType.LIST, list_id, data)
    await db.commit()
    return list_obj


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list(
    list_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a list."""
    service = ListService(db)
    await service.soft_delete(tenant, ListType.LIST, list_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{list_id}/duplicate", response_model=DuplicationRead, status_code=status.HTTP_201_CREATED)
async def duplicate_list(
    list_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Duplicate a list with its filters and, for static lists, its companies.

    truncated is true when only part of the companies could be copied.
    """
    service = DuplicationService(db)
    result = await service.duplicate_list(tenant, session, list_id)
    await db.commit()
    return DuplicationRead.model_validate(result)


@router.post("/{list_id}/companies", status_code=status.HTTP_204_NO_CONTENT)
async def add_companies(
    list_id: UUID,
    data: MembershipRequest,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Add companies to a list. Companies already in the list are ignored."""
    service = MembershipService(db)
    await service.add_members(tenant, list_id, data.company_ids)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{list_id}/companies/check", response_model=Dict[str, bool])
async def check_companies(
    list_id: UUID,
    data: MembershipRequest,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Report, per company id, whether it is already in the list."""
    service = MembershipService(db)
    return await service.check_membership(tenant, list_id, data.company_ids)


@router.get("/{list_id}/companies", response_model=MemberPage, response_model_by_alias=True)
async def list_companies(
    list_id: UUID,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.LIST_MEMBERS_DEFAULT_PAGE_SIZE, ge=1, le=settings.LIST_MAX_PAGE_SIZE),
    search: Optional[str] = None,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """List the companies in a list, most recently added first."""
    service = MembershipService(db)
    return await service.list_members(tenant, ListType.LIST, list_id, page, per_page, search)


@router.delete("/{list_id}/companies/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_company(
    list_id: UUID,
    company_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Remove a company from a list."""
    service = MembershipService(db)
    await service.remove_member(tenant, ListType.LIST, list_id, company_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
