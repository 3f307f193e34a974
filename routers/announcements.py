# routers/announcements.py

from fastapi import APIRouter, Depends, Query

from dependencies.auth import get_current_user, CurrentUser
from core.permission_helpers import has_permission, requires_permission
from core.store import EntityStore, get_store
from models.announcement import AnnouncementCreate, AnnouncementUpdate
from services.announcements import (
    create_announcement,
    delete_announcement,
    list_announcements,
    update_announcement,
)

router = APIRouter(
    prefix="/announcements",
    tags=["Announcements"],
)


# -----------------------------------------------------
# GET /announcements
# Every signed-in account, newbies included
# -----------------------------------------------------
@router.get("", summary="List announcements")
def get_announcements(
    include_archived: bool = Query(False, description="Admins only: include archived and expired"),
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    include_archived = include_archived and has_permission(current_user, "announcements:write")
    return {
        "success": True,
        "announcements": list_announcements(store, include_archived=include_archived),
    }


@router.post("", summary="Publish an announcement")
def post_announcement(
    payload: AnnouncementCreate,
    current_user: CurrentUser = Depends(requires_permission("announcements:write")),
    store: EntityStore = Depends(get_store),
):
    announcement_id = create_announcement(
        store,
        payload.model_dump(mode="json", exclude_none=True),
        current_user.id,
        author_name=current_user.display_name,
    )
    return {"success": True, "id": announcement_id}


@router.patch("/{announcement_id}", summary="Edit or archive an announcement")
def patch_announcement(
    announcement_id: str,
    payload: AnnouncementUpdate,
    current_user: CurrentUser = Depends(requires_permission("announcements:write")),
    store: EntityStore = Depends(get_store),
):
    announcement = update_announcement(
        store, announcement_id, payload.model_dump(mode="json", exclude_unset=True)
    )
    return {"success": True, "announcement": announcement}


@router.delete("/{announcement_id}", summary="Delete an announcement")
def remove_announcement(
    announcement_id: str,
    current_user: CurrentUser = Depends(requires_permission("announcements:write")),
    store: EntityStore = Depends(get_store),
):
    delete_announcement(store, announcement_id)
    return {"success": True}
