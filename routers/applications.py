# routers/applications.py

from fastapi import APIRouter, Depends

from dependencies.auth import CurrentUser
from core.permission_helpers import requires_permission
from core.store import EntityStore, get_store
from models.application import ApplicationDecision
from services.applications import list_pending_applications, process_application

router = APIRouter(
    prefix="/applications",
    tags=["Applications"],
)


@router.get("", summary="Applications awaiting a decision")
def get_pending_applications(
    current_user: CurrentUser = Depends(requires_permission("applications:review")),
    store: EntityStore = Depends(get_store),
):
    return {"success": True, "applications": list_pending_applications(store)}


@router.post("/{user_id}/decision", summary="Accept or deny an application")
def decide_application(
    user_id: str,
    payload: ApplicationDecision,
    current_user: CurrentUser = Depends(requires_permission("applications:review")),
    store: EntityStore = Depends(get_store),
):
    """
    Accepting turns the applicant into a student; denying leaves them a
    newbie. Either way the decision is appended to their communication log.
    """
    user = process_application(
        store,
        user_id,
        payload.decision,
        payload.message,
        admin_id=current_user.id,
    )
    return {
        "success": True,
        "user_id": user_id,
        "application_status": user.get("application_status"),
        "role": user.get("role"),
    }
