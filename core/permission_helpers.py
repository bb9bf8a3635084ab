from fastapi import Depends, HTTPException

from dependencies.auth import get_current_user, CurrentUser
from core.permissions import ROLE_PERMISSIONS
from models.enums import UserRole


# -----------------------------------------------------
# Collect effective permissions:
#   • role-based permissions
#   • user-specific overrides from user_metadata["permissions"]
# -----------------------------------------------------
def get_effective_permissions(user: CurrentUser) -> set:
    role_perms = set(ROLE_PERMISSIONS.get(user.role, []))

    user_overrides = set()
    raw = getattr(user, "permissions", None)

    if isinstance(raw, list):
        user_overrides = set(raw)

    return role_perms.union(user_overrides)


# -----------------------------------------------------
# Permission evaluation
# -----------------------------------------------------
def has_permission(user: CurrentUser, permission: str) -> bool:
    effective = get_effective_permissions(user)

    # Wildcard grants everything
    if "*" in effective:
        return True

    return permission in effective


# -----------------------------------------------------
# FastAPI dependency wrapper
# -----------------------------------------------------
def requires_permission(permission: str):
    """
    Usage:
        @router.post("", dependencies=[Depends(requires_permission("units:write"))])
    """

    def dependency(current_user: CurrentUser = Depends(get_current_user)):
        if not has_permission(current_user, permission):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: '{permission}' required"
            )
        return current_user

    return dependency


# ============================================================
# TENANT-LEVEL HELPERS
# ============================================================

def is_platform_admin(user: CurrentUser) -> bool:
    """Platform admins are not bound to a single property."""
    return user.role == UserRole.platform_admin.value


def require_condo_access(user: CurrentUser, condo_id: str):
    """Raise 403 unless the user is a platform admin or belongs to `condo_id`."""
    if is_platform_admin(user):
        return
    if not user.condo_id or user.condo_id != condo_id:
        raise HTTPException(
            status_code=403,
            detail="Access denied to this property"
        )
