# routers/messages.py

"""
Applicant and student chat with the residence office, stored on the
user's communication log.
"""

from fastapi import APIRouter, Depends

from dependencies.auth import get_current_user, CurrentUser
from core.errors import UnauthorizedError
from core.permission_helpers import is_admin, requires_permission
from core.store import EntityStore, get_store
from models.application import MessageCreate
from models.enums import MessageSender
from services.applications import add_communication, get_communication_log

router = APIRouter(
    prefix="/messages",
    tags=["Messages"],
)


def _require_resident(current_user: CurrentUser):
    if is_admin(current_user):
        raise UnauthorizedError("Admins reply through /messages/{user_id}")


# -----------------------------------------------------
# Own thread (students and applicants)
# -----------------------------------------------------
@router.get("", summary="My conversation with the residence office")
def get_my_messages(
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    _require_resident(current_user)
    return {"success": True, "messages": get_communication_log(store, current_user.id)}


@router.post("", summary="Message the residence office")
def send_message(
    payload: MessageCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    _require_resident(current_user)
    entry = add_communication(
        store, current_user.id, payload.message, MessageSender.student, current_user.id
    )
    return {"success": True, "message": entry}


# -----------------------------------------------------
# Admin side
# -----------------------------------------------------
@router.get("/{user_id}", summary="Conversation with one user")
def get_user_messages(
    user_id: str,
    current_user: CurrentUser = Depends(requires_permission("messages:write")),
    store: EntityStore = Depends(get_store),
):
    return {"success": True, "messages": get_communication_log(store, user_id)}


@router.post("/{user_id}", summary="Reply to a user")
def reply_to_user(
    user_id: str,
    payload: MessageCreate,
    current_user: CurrentUser = Depends(requires_permission("messages:write")),
    store: EntityStore = Depends(get_store),
):
    entry = add_communication(
        store, user_id, payload.message, MessageSender.admin, current_user.id
    )
    return {"success": True, "message": entry}
