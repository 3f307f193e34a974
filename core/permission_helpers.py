from fastapi import Depends

from dependencies.auth import get_current_user, CurrentUser
from core.errors import UnauthorizedError
from core.permissions import ROLE_PERMISSIONS, ADMIN_ROLES


# -----------------------------------------------------
# Collect effective permissions for the user's role
# -----------------------------------------------------
def get_effective_permissions(user: CurrentUser) -> set:
    # Super admin = master key
    if user.role == "superadmin":
        return {"*"}

    return set(ROLE_PERMISSIONS.get(user.role, []))


# -----------------------------------------------------
# Permission evaluation
# -----------------------------------------------------
def has_permission(user: CurrentUser, permission: str) -> bool:
    effective = get_effective_permissions(user)

    # Wildcard grants everything
    if "*" in effective:
        return True

    return permission in effective


def ensure_permission(user: CurrentUser, permission: str):
    if not has_permission(user, permission):
        raise UnauthorizedError(f"Insufficient permissions: '{permission}' required")


# -----------------------------------------------------
# FastAPI dependency wrapper
# -----------------------------------------------------
def requires_permission(permission: str):
    """
    Usage:
        @router.post("/", dependencies=[Depends(requires_permission("announcements:write"))])
    """

    def dependency(current_user: CurrentUser = Depends(get_current_user)):
        ensure_permission(current_user, permission)
        return current_user

    return dependency


# ============================================================
# REQUEST-KIND HELPERS
# ============================================================

def is_admin(user: CurrentUser) -> bool:
    return user.role in ADMIN_ROLES


def can_approve(user: CurrentUser, kind) -> bool:
    """Admin sub-types only act on the request kinds of their office."""
    return has_permission(user, f"{kind}:approve")


def require_approver(user: CurrentUser, kind):
    if not can_approve(user, kind):
        raise UnauthorizedError(f"Your role cannot manage {kind} requests")


def require_submitter(user: CurrentUser):
    if not has_permission(user, "requests:submit"):
        raise UnauthorizedError("Only accepted students can submit requests")
