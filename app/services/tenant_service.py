"""
Tenant resolution.

Works out which customer the caller is acting as. Two sources are
consulted: the customer_id claim carried in the session token, and the
privilege oracle (the users table). The claim wins when present; system
admins select a customer by setting that claim.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import TenantResolutionFailed
from app.repositories.user_repository import UserRepository
from app.schemas.user import AuthSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant for one request. Never cached."""

    effective_customer_id: Optional[UUID] = None
    is_system_admin: bool = False
    error: Optional[str] = None
    # A customer value was supplied but could not be parsed
    rejected: bool = False

    @property
    def is_scoped(self) -> bool:
        return self.effective_customer_id is not None

    def ensure_usable(self) -> None:
        """
        Reject callers that have neither a customer nor admin privilege.

        A rejected customer value is never usable, not even for a system
        admin, who would otherwise run unscoped.
        """
        if self.rejected or (self.effective_customer_id is None and not self.is_system_admin):
            raise TenantResolutionFailed(
                f"Failed to get customer ID: {self.error or 'not available'}"
            )

    def require_customer(self, action: str) -> UUID:
        """The concrete customer id; creates and edits cannot run unscoped."""
        self.ensure_usable()
        if self.effective_customer_id is None:
            raise TenantResolutionFailed(
                f"Cannot {action}: no customer context. Select a customer first."
            )
        return self.effective_customer_id


def _normalize(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve_tenant(
    claim_value: Any,
    oracle_value: Any,
    oracle_is_admin: bool,
    oracle_error: Optional[str] = None,
) -> TenantContext:
    """
    Combine the session claim and the oracle answer into a TenantContext.

    A non-blank string claim takes precedence. Otherwise the oracle value
    is used, unwrapping a list to its first element. A value that is not a
    UUID is reported through ``error`` and marks the context rejected.
    """
    claim = claim_value.strip() if isinstance(claim_value, str) else ""
    raw = claim or _normalize(oracle_value)

    customer_id: Optional[UUID] = None
    error = oracle_error
    rejected = False
    if raw:
        try:
            customer_id = UUID(raw)
        except ValueError:
            error = f"invalid customer id {raw!r}"
            rejected = True

    return TenantContext(
        effective_customer_id=customer_id,
        is_system_admin=bool(oracle_is_admin),
        error=error,
        rejected=rejected,
    )


async def resolve_effective_customer(db: AsyncSession, session: AuthSession) -> TenantContext:
    """
    Resolve the caller's tenant for this request.

    Oracle failures are folded into the context instead of raised; the
    operation that needs a tenant reports them via ensure_usable(). The
    lookups run in their own SAVEPOINT.
    """
    users = UserRepository(db)
    is_admin = False
    oracle_value = None
    oracle_error = None

    try:
        async with db.begin_nested():
            is_admin = await users.is_system_admin(session.auth_user_id)
            oracle_value = await users.current_customer_id(session.auth_user_id)
    except SQLAlchemyError as exc:
        logger.warning("Privilege lookup failed for %s: %s", session.auth_user_id, exc)
        oracle_error = str(getattr(exc, "orig", None) or exc)

    return resolve_tenant(
        session.claimed_customer_id,
        oracle_value,
        is_admin,
        oracle_error,
    )
