"""
User and session Pydantic schemas.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class AuthSession(BaseModel):
    """
    Verified session token payload.

    auth_user_id is the token subject; the application user is looked up
    from it. app_metadata may carry the customer the caller acts as.
    """

    auth_user_id: str
    email: Optional[str] = None
    app_metadata: Dict[str, Any] = {}

    @property
    def claimed_customer_id(self) -> Any:
        """Raw customer_id claim, unvalidated."""
        return (self.app_metadata or {}).get("customer_id")

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "AuthSession":
        return cls(
            auth_user_id=str(claims["sub"]),
            email=claims.get("email"),
            app_metadata=claims.get("app_metadata") or {},
        )
