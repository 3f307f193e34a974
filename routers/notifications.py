# routers/notifications.py

from fastapi import APIRouter, Depends, Query

from dependencies.auth import get_current_user, CurrentUser
from core.notifications import NotificationDispatcher
from core.store import EntityStore, get_store

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)


def get_notifier(store: EntityStore = Depends(get_store)) -> NotificationDispatcher:
    return NotificationDispatcher(store)


@router.get("", summary="Notifications for the current user")
def list_notifications(
    unread_only: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    notifications = notifier.list_for_user(current_user.id, unread_only=unread_only)
    unread = sum(1 for n in notifications if not n.get("read"))
    return {"success": True, "notifications": notifications, "unread_count": unread}


@router.patch("/{notification_id}/read", summary="Mark one notification as read")
def mark_notification_read(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    notification = notifier.mark_read(notification_id, current_user.id)
    return {"success": True, "notification": notification}


@router.post("/read-all", summary="Mark every notification as read")
def mark_all_notifications_read(
    current_user: CurrentUser = Depends(get_current_user),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    updated = notifier.mark_all_read(current_user.id)
    return {"success": True, "updated": updated}
