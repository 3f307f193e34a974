# routers/admins.py

from fastapi import APIRouter, Depends

from dependencies.auth import CurrentUser
from core.permission_helpers import requires_permission
from core.store import EntityStore, get_store
from models.admin import AdminCreate, AdminUpdate
from services.admins import create_admin, delete_admin, list_admins, update_admin

router = APIRouter(
    prefix="/admins",
    tags=["Admins"],
)

# Superadmins only: no role other than the wildcard grants this
manage_admins = requires_permission("admins:manage")


@router.get("", summary="List admin accounts")
def get_admins(
    current_user: CurrentUser = Depends(manage_admins),
    store: EntityStore = Depends(get_store),
):
    return {"success": True, "admins": list_admins(store)}


@router.post("", summary="Grant an account admin access")
def post_admin(
    payload: AdminCreate,
    current_user: CurrentUser = Depends(manage_admins),
    store: EntityStore = Depends(get_store),
):
    admin_id = create_admin(store, payload.model_dump(), created_by=current_user.id)
    return {"success": True, "id": admin_id}


@router.patch("/{admin_id}", summary="Change an admin's details or role")
def patch_admin(
    admin_id: str,
    payload: AdminUpdate,
    current_user: CurrentUser = Depends(manage_admins),
    store: EntityStore = Depends(get_store),
):
    admin = update_admin(store, admin_id, payload.model_dump(exclude_none=True))
    return {"success": True, "admin": admin}


@router.delete("/{admin_id}", summary="Revoke admin access")
def remove_admin(
    admin_id: str,
    current_user: CurrentUser = Depends(manage_admins),
    store: EntityStore = Depends(get_store),
):
    delete_admin(store, admin_id, requester_id=current_user.id)
    return {"success": True}
