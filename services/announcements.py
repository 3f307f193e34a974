# services/announcements.py

from typing import Callable, List, Optional

from core.errors import NotFoundError, ValidationError
from core.logging_config import logger
from core.store import EntityStore
from core.utils import parse_timestamp, sanitize, utcnow
from models.enums import AnnouncementStatus

ANNOUNCEMENTS_COLLECTION = "announcements"

EDITABLE_FIELDS = ("title", "content", "priority", "status", "expires_at")


def create_announcement(
    store: EntityStore,
    payload: dict,
    author_id: str,
    author_name: Optional[str] = None,
    clock: Callable = utcnow,
) -> str:
    data = sanitize({k: v for k, v in payload.items() if k in EDITABLE_FIELDS})
    for field in ("title", "content"):
        if not data.get(field):
            raise ValidationError(f"{field} is required")

    now = clock()
    announcement_id = store.create(
        ANNOUNCEMENTS_COLLECTION,
        {
            **data,
            "priority": data.get("priority") or "medium",
            "status": AnnouncementStatus.active.value,
            "created_by": author_id,
            "created_by_name": author_name or "Unknown Admin",
            "created_at": now,
            "updated_at": now,
        },
    )
    logger.info(f"Admin {author_id} published announcement {announcement_id}")
    return announcement_id


def list_announcements(
    store: EntityStore,
    include_archived: bool = False,
    clock: Callable = utcnow,
) -> List[dict]:
    """Newest first. Archived and expired announcements are hidden unless asked for."""
    filters = []
    if not include_archived:
        filters.append(("status", "eq", AnnouncementStatus.active.value))

    announcements = store.query(
        ANNOUNCEMENTS_COLLECTION, filters, order_by="created_at", descending=True
    )
    if include_archived:
        return announcements

    now = clock()
    return [
        a for a in announcements
        if not a.get("expires_at") or parse_timestamp(a["expires_at"]) > now
    ]


def update_announcement(
    store: EntityStore,
    announcement_id: str,
    changes: dict,
    clock: Callable = utcnow,
) -> dict:
    if not store.get(ANNOUNCEMENTS_COLLECTION, announcement_id):
        raise NotFoundError("Announcement not found")

    data = sanitize({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
    # Only expires_at may be cleared
    for field in ("title", "content", "priority", "status"):
        if field in data and not data[field]:
            raise ValidationError(f"{field} cannot be empty")

    data["updated_at"] = clock()
    updated = store.update(ANNOUNCEMENTS_COLLECTION, announcement_id, data)
    if updated is None:
        raise NotFoundError("Announcement not found")
    return updated


def delete_announcement(store: EntityStore, announcement_id: str):
    if not store.delete(ANNOUNCEMENTS_COLLECTION, announcement_id):
        raise NotFoundError("Announcement not found")
    logger.info(f"Announcement {announcement_id} deleted")
