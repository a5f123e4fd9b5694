"""
User repository - database operations for User.

Also answers the privilege questions tenant resolution asks about the
caller (system admin? which customer?).
"""

from typing import Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import Roles, check_role_permission
from app.models.user import User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_auth_user_id(self, auth_user_id: str) -> Optional[User]:
        """Get the application user linked to an authentication identity."""
        if not auth_user_id:
            return None
        result = await self.db.execute(
            select(User).where(User.auth_user_id == auth_user_id)
        )
        return result.scalar_one_or_none()

    async def get_full_names(self, user_ids: Iterable[UUID]) -> Dict[UUID, Optional[str]]:
        """Map user ids to full names in one query."""
        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        result = await self.db.execute(
            select(User.user_id, User.full_name).where(User.user_id.in_(ids))
        )
        return {row.user_id: row.full_name for row in result}

    async def is_system_admin(self, auth_user_id: str) -> bool:
        user = await self.get_by_auth_user_id(auth_user_id)
        return bool(user and check_role_permission(user.role, [Roles.SYSTEM_ADMIN]))

    async def is_customer_success(self, auth_user_id: str) -> bool:
        user = await self.get_by_auth_user_id(auth_user_id)
        return bool(user and check_role_permission(user.role, [Roles.CUSTOMER_SUCCESS]))

    async def current_customer_id(self, auth_user_id: str) -> Optional[UUID]:
        """The customer the caller's user row belongs to, if any."""
        result = await self.db.execute(
            select(User.customer_id).where(User.auth_user_id == auth_user_id)
        )
        return result.scalar_one_or_none()
