# services/applications.py

"""
Residence applications and the applicant/admin message thread.

A newly registered account is a ``newbie`` with a pending application.
An admin accepts (the account becomes a ``student`` and gets a student
profile) or denies it, once. Every decision and every chat message is
appended to the user's ``communication_log``.
"""

from typing import Callable, List, Optional

from core.errors import AlreadyFinalizedError, ConflictError, NotFoundError, ValidationError
from core.logging_config import logger
from core.notifications import NotificationDispatcher
from core.store import EntityStore
from core.utils import utcnow
from models.enums import ApplicationStatus, MessageSender, NotificationType, Role

USERS_COLLECTION = "users"
STUDENTS_COLLECTION = "students"

DECISIONS = (ApplicationStatus.accepted.value, ApplicationStatus.denied.value)

# Copied from the user document into the student profile
PROFILE_FIELDS = (
    "email",
    "name",
    "surname",
    "full_name",
    "phone",
    "place_of_study",
    "room_number",
    "tenant_code",
)


def list_pending_applications(store: EntityStore) -> List[dict]:
    """Pending applications plus any newbie accounts, without duplicates."""
    pending = store.query(
        USERS_COLLECTION,
        [("application_status", "eq", ApplicationStatus.pending.value)],
        order_by="created_at",
        descending=True,
    )
    newbies = store.query(
        USERS_COLLECTION,
        [("role", "eq", Role.newbie.value)],
        order_by="created_at",
        descending=True,
    )

    seen = set()
    unique = []
    for user in pending + newbies:
        if user["id"] in seen:
            continue
        seen.add(user["id"])
        unique.append(user)
    return unique


def process_application(
    store: EntityStore,
    user_id: str,
    decision: str,
    message: str,
    admin_id: str,
    notifier: Optional[NotificationDispatcher] = None,
    clock: Callable = utcnow,
) -> dict:
    decision = str(decision)
    if decision not in DECISIONS:
        raise ValidationError(f"Decision must be one of: {', '.join(DECISIONS)}")

    user = store.get(USERS_COLLECTION, user_id)
    if not user:
        raise NotFoundError("User not found")

    current = user.get("application_status")
    if current != ApplicationStatus.pending.value:
        raise AlreadyFinalizedError("Application has already been processed")

    now = clock()
    log_entry = {
        "type": "application_status_change",
        "status": decision,
        "message": message or "",
        "timestamp": now,
        "admin_id": admin_id,
    }
    accepted = decision == ApplicationStatus.accepted.value

    created_profile = False
    if accepted:
        created_profile = _ensure_student_profile(store, user, now)

    updated = store.update(
        USERS_COLLECTION,
        user_id,
        {
            "application_status": decision,
            "role": Role.student.value if accepted else Role.newbie.value,
            "updated_at": now,
            "communication_log": list(user.get("communication_log") or []) + [log_entry],
        },
        expected={"application_status": ApplicationStatus.pending.value},
    )
    if updated is None:
        if created_profile:
            store.delete(STUDENTS_COLLECTION, user_id)
        raise ConflictError("Application was processed by someone else")

    logger.info(f"Admin {admin_id} {decision} application of user {user_id}")

    notifier = notifier or NotificationDispatcher(store, clock)
    notifier.dispatch(
        user_id,
        NotificationType.message,
        "Application Update",
        message or f"Your residence application has been {decision}",
    )
    return updated


def _ensure_student_profile(store: EntityStore, user: dict, now) -> bool:
    """Create the student profile for an accepted applicant; False if it already existed."""
    if store.get(STUDENTS_COLLECTION, user["id"]):
        return False

    profile = {field: user.get(field) for field in PROFILE_FIELDS}
    store.create(
        STUDENTS_COLLECTION,
        {
            **profile,
            "id": user["id"],
            "user_id": user["id"],
            "status": "active",
            "created_at": now,
            "updated_at": now,
        },
    )
    return True


# ============================================================
# COMMUNICATION LOG
# ============================================================
def get_communication_log(store: EntityStore, user_id: str) -> List[dict]:
    user = store.get(USERS_COLLECTION, user_id)
    if not user:
        raise NotFoundError("User not found")
    return list(user.get("communication_log") or [])


def add_communication(
    store: EntityStore,
    user_id: str,
    message: str,
    sent_by: str,
    sender_id: str,
    notifier: Optional[NotificationDispatcher] = None,
    clock: Callable = utcnow,
) -> dict:
    """
    Append a chat message to the user's communication log.

    Admin messages also land in the user's notification inbox.
    """
    message = (message or "").strip()
    if not message:
        raise ValidationError("message is required")
    sent_by = str(sent_by)
    if sent_by not in MessageSender.list():
        raise ValidationError(f"sent_by must be one of: {', '.join(MessageSender.list())}")

    user = store.get(USERS_COLLECTION, user_id)
    if not user:
        raise NotFoundError("User not found")

    now = clock()
    entry = {
        "type": "message",
        "message": message,
        "sent_by": sent_by,
        "sender_id": sender_id,
        "timestamp": now,
    }

    # Only applies if nobody appended since the read
    updated = store.update(
        USERS_COLLECTION,
        user_id,
        {
            "communication_log": list(user.get("communication_log") or []) + [entry],
            "updated_at": now,
        },
        expected={"updated_at": user.get("updated_at")},
    )
    if updated is None:
        raise ConflictError("The conversation changed while sending; reload and retry")

    logger.info(f"{sent_by.capitalize()} {sender_id} messaged user {user_id}")

    if sent_by == MessageSender.admin.value:
        notifier = notifier or NotificationDispatcher(store, clock)
        notifier.dispatch(user_id, NotificationType.message, "New Message", message)
    return entry
