"""
Role helpers for the lists/segments API.

Defines user roles and the capability checks derived from them.
"""

from typing import List


class Roles:
    """Standard roles stored on users.role."""
    SYSTEM_ADMIN = "system_admin"
    CUSTOMER_SUCCESS = "customer_success"
    CUSTOMER_ADMIN = "customer_admin"
    MEMBER = "member"

    # All roles list for validation
    ALL = [SYSTEM_ADMIN, CUSTOMER_SUCCESS, CUSTOMER_ADMIN, MEMBER]

    # Role capabilities
    # system_admin: sees every customer, may impersonate one; view-only on segments
    # customer_success: view-only on segments
    # customer_admin / member: full access within their own customer


def check_role_permission(user_role: str, allowed_roles: List[str]) -> bool:
    """
    Check if user's role is in the list of allowed roles.

    Args:
        user_role: The user's current role
        allowed_roles: List of roles that are permitted

    Returns:
        True if user has permission, False otherwise
    """
    if not user_role or not allowed_roles:
        return False
    return user_role in allowed_roles


def can_edit_segments(is_system_admin: bool, is_customer_success: bool) -> bool:
    """
    Whether a caller may create, edit and remove segments.

    System admins and customer success users can view segments but not
    modify them.
    """
    return not is_system_admin and not is_customer_success
