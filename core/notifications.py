# core/notifications.py

from typing import Callable, List, Optional

from core.errors import NotFoundError, ResidenceError
from core.logging_config import logger
from core.store import EntityStore
from core.utils import utcnow

NOTIFICATIONS_COLLECTION = "notifications"


class NotificationDispatcher:
    """
    Writes notification records that the student portal polls.

    Delivery is best-effort: a failed write is logged and never undoes the
    state change that triggered it.
    """

    def __init__(self, store: EntityStore, clock: Callable = utcnow):
        self.store = store
        self.clock = clock

    # -----------------------------------------------------
    # 📨 Dispatch
    # -----------------------------------------------------
    def dispatch(self, user_id: str, type: str, title: str, message: str) -> Optional[str]:
        if not user_id:
            logger.debug("Notification without recipient: skipping.")
            return None

        now = self.clock()
        try:
            notification_id = self.store.create(
                NOTIFICATIONS_COLLECTION,
                {
                    "user_id": user_id,
                    "title": title,
                    "message": message,
                    "type": str(type),
                    "read": False,
                    "created_at": now,
                    "updated_at": now,
                },
            )
        except (ResidenceError, OSError) as e:
            logger.warning(f"Notification for {user_id} failed: {e}")
            return None

        logger.info(f"Notification {notification_id} ({type}) sent to {user_id}")
        return notification_id

    # -----------------------------------------------------
    # 📥 Inbox
    # -----------------------------------------------------
    def list_for_user(self, user_id: str, unread_only: bool = False) -> List[dict]:
        filters = [("user_id", "eq", user_id)]
        if unread_only:
            filters.append(("read", "eq", False))
        return self.store.query(
            NOTIFICATIONS_COLLECTION, filters, order_by="created_at", descending=True
        )

    def mark_read(self, notification_id: str, user_id: str) -> dict:
        notification = self.store.get(NOTIFICATIONS_COLLECTION, notification_id)
        # Another user's notification is reported as missing
        if not notification or notification.get("user_id") != user_id:
            raise NotFoundError("Notification not found")

        updated = self.store.update(
            NOTIFICATIONS_COLLECTION,
            notification_id,
            {"read": True, "updated_at": self.clock()},
        )
        return updated or {**notification, "read": True}

    def mark_all_read(self, user_id: str) -> int:
        unread = self.list_for_user(user_id, unread_only=True)
        now = self.clock()
        for notification in unread:
            self.store.update(
                NOTIFICATIONS_COLLECTION,
                notification["id"],
                {"read": True, "updated_at": now},
            )
        return len(unread)
