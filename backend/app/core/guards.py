"""
Security guards for role-based and ownership-based access control.

The plain functions here are the access policy used by the workflow layer;
require_role/require_accountant wrap them as FastAPI dependencies.
"""

from typing import List, Optional
from fastapi import Depends
from backend.app.models.enums import UserRole
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import AuthenticationError, InsufficientPermissionsError
from backend.app.schemas.user import UserRecord


def ensure_authenticated(current_user: Optional[UserRecord]) -> UserRecord:
    """Reject anonymous callers."""
    if current_user is None:
        raise AuthenticationError("Authentication required")
    return current_user


def ensure_role(current_user: Optional[UserRecord], allowed_roles: List[UserRole]) -> UserRecord:
    """
    Raise 403 unless the caller holds one of allowed_roles.
    
    Raises:
        AuthenticationError if there is no caller
        InsufficientPermissionsError if the role is not allowed
    """
    current_user = ensure_authenticated(current_user)
    if current_user.role not in allowed_roles:
        raise InsufficientPermissionsError(
            f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
        )
    return current_user


def ensure_accountant(current_user: Optional[UserRecord]) -> UserRecord:
    return ensure_role(current_user, [UserRole.ACCOUNTANT])


def verify_ownership(
    resource_owner_id: int,
    current_user: UserRecord,
    allow_accountant: bool = False
) -> bool:
    """
    Verify that the current user may act on a resource.
    
    Owners always may. Accountants may only when allow_accountant is set,
    which is the case for reads of client records and for invoice status
    changes; expense/document reviews go through ensure_accountant instead.
    
    Args:
        resource_owner_id: The user_id of the resource being accessed
        current_user: Authenticated user
        allow_accountant: Whether any accountant is also permitted
        
    Returns:
        True if access is granted, False otherwise
    """
    if current_user.id == resource_owner_id:
        return True
    
    return allow_accountant and current_user.role == UserRole.ACCOUNTANT


class OwnershipGuard:
    """
    Class-based ownership guard for validating per-user access.
    
    Usage:
        ownership_guard = OwnershipGuard()
        invoice = await store.get_invoice(invoice_id)
        ownership_guard.enforce(invoice.user_id, current_user, "invoice", allow_accountant=True)
    """
    
    def enforce(
        self,
        resource_owner_id: int,
        current_user: Optional[UserRecord],
        resource_name: str = "resource",
        allow_accountant: bool = False
    ) -> UserRecord:
        """
        Enforce ownership validation, raise 403 if access denied.
        
        Raises:
            AuthenticationError if there is no caller
            InsufficientPermissionsError if ownership check fails
        """
        current_user = ensure_authenticated(current_user)
        if not verify_ownership(resource_owner_id, current_user, allow_accountant):
            raise InsufficientPermissionsError(
                f"Access denied. You do not have permission to access this {resource_name}.",
                details={"resource": resource_name}
            )
        return current_user


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.
    
    Usage:
        @router.get("/accountant/clients")
        async def list_clients(current_user: UserRecord = Depends(require_role([UserRole.ACCOUNTANT]))):
            ...
    
    Args:
        allowed_roles: List of UserRole enums that are allowed to access the endpoint
        
    Returns:
        FastAPI dependency function that validates user role
    """
    async def role_checker(current_user: UserRecord = Depends(get_current_user)) -> UserRecord:
        return ensure_role(current_user, allowed_roles)
    
    return role_checker


# Dependency for accountant-only endpoints
require_accountant = require_role([UserRole.ACCOUNTANT])
