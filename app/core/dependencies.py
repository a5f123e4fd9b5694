"""
FastAPI dependencies for the application.
"""

import logging
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_db
from app.errors import NotAuthenticated
from app.schemas.user import AuthSession
from app.services.tenant_service import TenantContext, resolve_effective_customer

logger = logging.getLogger(__name__)

# Security scheme for JWT bearer tokens; a missing header raises NotAuthenticated
security = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_auth_session", "get_tenant_context"]


def decode_session_token(token: str) -> AuthSession:
    """Verify a session token and return its claims."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError as exc:
        logger.info("Rejected session token: %s", exc)
        raise NotAuthenticated("Invalid authentication credentials") from exc

    if not claims.get("sub"):
        raise NotAuthenticated("Invalid token payload")
    return AuthSession.from_claims(claims)


async def get_auth_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthSession:
    """
    Get the verified session from the bearer token.

    Raises:
        NotAuthenticated: token missing, invalid, or without a subject
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated("Not authenticated")
    return decode_session_token(credentials.credentials)


async def get_tenant_context(
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
) -> TenantContext:
    """Resolve the caller's tenant, once per request."""
    return await resolve_effective_customer(db, session)
