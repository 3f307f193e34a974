# services/capacity.py

"""Guest ceiling: one primary guest plus up to two more, per student."""

from core.errors import CapacityExceededError
from core.store import EntityStore
from models.enums import GuestStatus, SleepoverStatus
from services.lifecycles import GUEST, SLEEPOVER


def max_additional_guests(max_guests: int) -> int:
    return max_guests - 1


def check_batch_size(additional_guests: list, max_guests: int):
    limit = max_additional_guests(max_guests)
    if len(additional_guests or []) > limit:
        raise CapacityExceededError(
            f"Maximum of {max_guests} guests allowed (1 main + {limit} additional)"
        )


def active_guest_count(store: EntityStore, user_id: str) -> int:
    return len(
        store.query(
            GUEST.collection,
            [("user_id", "eq", user_id), ("status", "eq", GuestStatus.active.value)],
        )
    )


def check_guest_capacity(store: EntityStore, user_id: str, batch_size: int, max_guests: int):
    """Active guest records plus the incoming batch may not exceed ``max_guests``."""
    active = active_guest_count(store, user_id)
    if active + batch_size > max_guests:
        raise CapacityExceededError(
            f"Maximum of {max_guests} guests allowed; "
            f"{active} already signed in, {batch_size} requested"
        )


def find_active_sleepovers(store: EntityStore, user_id: str) -> list:
    return store.query(
        SLEEPOVER.collection,
        [
            ("user_id", "eq", user_id),
            ("status", "eq", SleepoverStatus.approved.value),
            ("is_active", "eq", True),
        ],
        order_by="updated_at",
        descending=True,
    )


def check_single_active_sleepover(store: EntityStore, user_id: str, request_id: str):
    others = [s for s in find_active_sleepovers(store, user_id) if s["id"] != request_id]
    if others:
        raise CapacityExceededError(
            "Student already has an active sleepover guest; check them out first"
        )
