# services/lifecycle_engine.py

"""
Request lifecycle engine.

One parameterized engine for guest visits, sleepovers, maintenance tickets
and complaints: submission, admin transitions, PIN-gated checkout and the
filtered listings the portals show. Legal moves come from
``services.lifecycles``; the engine only enforces them.

Every write that depends on a status read is conditional on that status,
so two approvers acting at once cannot both succeed.
"""

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from core.config import Settings, settings as default_settings
from core.errors import (
    AlreadyFinalizedError,
    ConflictError,
    InvalidPinError,
    InvalidTransitionError,
    NoActiveSleepoverError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from core.logging_config import logger
from core.notifications import NotificationDispatcher
from core.store import EntityStore
from core.utils import day_window, parse_date, parse_timestamp, residence_tz, sanitize, utcnow
from models.enums import GuestStatus, RequestKind, SleepoverStatus
from services import capacity
from services.filters import RequestFilter, build_filters
from services.lifecycles import GUEST, SLEEPOVER, Lifecycle, lifecycle_for

# Fields a submitter may never set directly
PROTECTED_FIELDS = (
    "id",
    "user_id",
    "status",
    "created_at",
    "updated_at",
    "admin_response",
    "reviewed_by",
    "is_active",
    "sign_out_time",
    "checkout_time",
    "security_code",
    "party_id",
    "assigned_staff_id",
)

SLEEPOVER_GUEST_FIELDS = ("name", "surname", "phone_number")
VISIT_GUEST_FIELDS = ("first_name", "last_name", "phone_number")


@dataclass
class CheckoutResult:
    request_id: str
    guest_name: str
    sign_out_time: datetime


class RequestLifecycleEngine:

    def __init__(
        self,
        store: EntityStore,
        notifier: Optional[NotificationDispatcher] = None,
        config: Settings = default_settings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock
        self.notifier = notifier or NotificationDispatcher(store, clock)
        self.settings = config
        self.tz = residence_tz(config.RESIDENCE_TIMEZONE)

    # =========================================================
    # SUBMIT
    # =========================================================
    def submit(self, kind, payload: dict, submitter_id: str) -> str:
        """
        Persist a new request in its kind's initial state and return its id.

        Guest batches are stored one record per person; the returned id is
        the primary guest's.
        """
        lifecycle = lifecycle_for(kind)
        if not submitter_id:
            raise ValidationError("submitter_id is required")

        data = sanitize(dict(payload))
        for key in PROTECTED_FIELDS:
            data.pop(key, None)
        _require(data, lifecycle.required_fields)

        now = self.clock()
        base = {
            **data,
            "user_id": submitter_id,
            "status": lifecycle.initial,
            "created_at": now,
            "updated_at": now,
        }

        if lifecycle.kind == RequestKind.guest:
            return self._submit_guest_batch(base, submitter_id)
        if lifecycle.kind == RequestKind.sleepover:
            base = self._prepare_sleepover(base)

        request_id = self.store.create(lifecycle.collection, base)
        logger.info(f"User {submitter_id} submitted {lifecycle.kind} request {request_id}")
        return request_id

    def _prepare_sleepover(self, document: dict) -> dict:
        additional = document.get("additional_guests") or []
        capacity.check_batch_size(additional, self.settings.MAX_GUESTS_PER_STUDENT)
        for index, guest in enumerate(additional, start=1):
            _require(guest, SLEEPOVER_GUEST_FIELDS, prefix=f"additional_guests[{index}].")

        start = _as_date(document["start_date"], "start_date")
        end = _as_date(document["end_date"], "end_date")
        if end < start:
            raise ValidationError("end_date cannot be before start_date")

        days = (end - start).days
        return {
            **document,
            "start_date": start,
            "end_date": end,
            "additional_guests": additional,
            "is_active": False,
            "sign_out_time": None,
            "security_code": str(100000 + secrets.randbelow(900000)),
            "duration_of_stay": f"{days} {'day' if days == 1 else 'days'}",
        }

    def _submit_guest_batch(self, document: dict, submitter_id: str) -> str:
        additional = document.pop("additional_guests", None) or []
        capacity.check_batch_size(additional, self.settings.MAX_GUESTS_PER_STUDENT)
        for index, guest in enumerate(additional, start=1):
            _require(guest, VISIT_GUEST_FIELDS, prefix=f"additional_guests[{index}].")

        document["from_date"] = _as_date(document["from_date"], "from_date")
        document["checkout_time"] = None
        capacity.check_guest_capacity(
            self.store,
            submitter_id,
            1 + len(additional),
            self.settings.MAX_GUESTS_PER_STUDENT,
        )

        primary_id = str(uuid.uuid4())
        records = [{**document, "id": primary_id, "party_id": None}]
        for guest in additional:
            records.append(
                {
                    **document,
                    "id": str(uuid.uuid4()),
                    "first_name": guest["first_name"],
                    "last_name": guest["last_name"],
                    "phone_number": guest["phone_number"],
                    "party_id": primary_id,
                }
            )

        # One write for the whole party: every record is stored or none is
        self.store.create_many(GUEST.collection, records)

        logger.info(
            f"User {submitter_id} signed in {1 + len(additional)} guest(s), primary record {primary_id}"
        )
        return primary_id

    # =========================================================
    # READ
    # =========================================================
    def get(self, kind, request_id: str) -> dict:
        lifecycle = lifecycle_for(kind)
        document = self.store.get(lifecycle.collection, request_id)
        if not document:
            raise NotFoundError(f"{lifecycle.kind.value.capitalize()} request {request_id} not found")
        return document

    def list_by_filter(self, kind, request_filter: RequestFilter) -> List[dict]:
        lifecycle = lifecycle_for(kind)
        filters = build_filters(lifecycle, request_filter, self.clock(), self.tz)
        return self.store.query(
            lifecycle.collection, filters, order_by="created_at", descending=True
        )

    # =========================================================
    # TRANSITION
    # =========================================================
    def transition(
        self,
        kind,
        request_id: str,
        new_status: str,
        approver_id: str,
        admin_response: Optional[str] = None,
    ) -> dict:
        """
        Move a request to ``new_status`` on behalf of an approver.

        Re-applying the current (non-terminal) status is a no-op. Terminal
        requests reject every transition.
        """
        lifecycle = lifecycle_for(kind)
        new_status = str(new_status)
        if not lifecycle.has_state(new_status):
            raise ValidationError(
                f"Invalid {lifecycle.kind} status '{new_status}'. "
                f"Must be one of: {', '.join(lifecycle.states)}"
            )
        if not approver_id:
            raise ValidationError("approver_id is required")

        document = self.get(kind, request_id)
        current = document["status"]

        if lifecycle.is_terminal(current):
            raise AlreadyFinalizedError(
                f"{lifecycle.kind.value.capitalize()} request {request_id} is already {current}"
            )
        if new_status == current:
            logger.info(f"{lifecycle.kind} request {request_id} already {current}; nothing to do")
            return document
        if not lifecycle.can_transition(current, new_status):
            raise InvalidTransitionError(
                f"Cannot move {lifecycle.kind} request from {current} to {new_status}"
            )

        now = self._next_updated_at(document)
        update = {
            "status": new_status,
            "updated_at": now,
            "reviewed_by": approver_id,
        }
        if admin_response is not None:
            update["admin_response"] = admin_response
        update.update(self._side_fields(lifecycle, document, new_status, now))

        updated = self.store.update(
            lifecycle.collection, request_id, update, expected={"status": current}
        )
        if updated is None:
            raise ConflictError(
                f"{lifecycle.kind.value.capitalize()} request {request_id} was changed by someone else; reload and retry"
            )

        logger.info(
            f"Approver {approver_id} moved {lifecycle.kind} request {request_id} from {current} to {new_status}"
        )
        self._notify(lifecycle, updated, lifecycle.describe_change(updated, new_status))
        return updated

    def _side_fields(self, lifecycle: Lifecycle, document: dict, new_status: str, now: datetime) -> dict:
        if lifecycle.kind == RequestKind.sleepover:
            if new_status == SleepoverStatus.approved.value:
                capacity.check_single_active_sleepover(self.store, document["user_id"], document["id"])
                return {"is_active": True}
            if new_status == SleepoverStatus.completed.value:
                return {"is_active": False, "sign_out_time": now}
        if lifecycle.kind == RequestKind.guest and new_status == GuestStatus.checked_out.value:
            return {"checkout_time": now}
        return {}

    # =========================================================
    # ASSIGN
    # =========================================================
    def assign(self, kind, request_id: str, staff_id: str, approver_id: str) -> dict:
        """
        Hand a maintenance ticket or complaint to a staff member.

        Assignment leaves the status alone; reassigning replaces the
        previous staff member.
        """
        lifecycle = lifecycle_for(kind)
        if not lifecycle.assignable:
            raise ValidationError(f"Staff cannot be assigned to {lifecycle.kind} requests")
        staff_id = str(staff_id or "").strip()
        if not staff_id:
            raise ValidationError("staff_id is required")
        if not approver_id:
            raise ValidationError("approver_id is required")

        document = self.get(kind, request_id)
        current = document["status"]
        if lifecycle.is_terminal(current):
            raise AlreadyFinalizedError(
                f"{lifecycle.kind.value.capitalize()} request {request_id} is already {current}"
            )

        updated = self.store.update(
            lifecycle.collection,
            request_id,
            {"assigned_staff_id": staff_id, "updated_at": self._next_updated_at(document)},
            expected={"status": current},
        )
        if updated is None:
            raise ConflictError(
                f"{lifecycle.kind.value.capitalize()} request {request_id} was changed by someone else; reload and retry"
            )

        logger.info(f"Approver {approver_id} assigned {lifecycle.kind} request {request_id} to staff {staff_id}")
        return updated

    # =========================================================
    # CHECKOUT
    # =========================================================
    def checkout_sleepover(self, user_id: str, pin: str) -> CheckoutResult:
        """
        Sign out the submitter's current sleepover guest.

        The PIN is the shared front-desk code entered by security staff.
        """
        if not user_id:
            raise ValidationError("user_id is required")
        self._check_pin(pin, self.settings.SLEEPOVER_CHECKOUT_PIN, f"sleepover checkout by {user_id}")

        now = self.clock()
        candidates = [
            s
            for s in capacity.find_active_sleepovers(self.store, user_id)
            if not s.get("sign_out_time") and self._within_stay(s, now)
        ]
        if not candidates:
            raise NoActiveSleepoverError("No active sleepover guest found to check out")
        if len(candidates) > 1:
            logger.warning(
                f"User {user_id} has {len(candidates)} active sleepovers; checking out {candidates[0]['id']}"
            )

        sleepover = candidates[0]
        signed_out_at = self._next_updated_at(sleepover)
        updated = self.store.update(
            SLEEPOVER.collection,
            sleepover["id"],
            {
                "is_active": False,
                "sign_out_time": signed_out_at,
                "status": SleepoverStatus.completed.value,
                "updated_at": signed_out_at,
            },
            expected={"status": SleepoverStatus.approved.value, "is_active": True},
        )
        if updated is None:
            raise ConflictError("Sleepover was changed by someone else; reload and retry")

        guest_name = f"{sleepover.get('guest_name', '')} {sleepover.get('guest_surname', '')}".strip()
        logger.info(f"User {user_id} checked out sleepover guest {guest_name} ({sleepover['id']})")
        self._notify(SLEEPOVER, updated, f"Guest {guest_name} signed out successfully", title="Sleepover Checkout")

        return CheckoutResult(
            request_id=sleepover["id"],
            guest_name=guest_name,
            sign_out_time=signed_out_at,
        )

    def checkout_guest_visit(self, request_id: str, pin: str, requester_id: Optional[str] = None) -> dict:
        """
        Check out one guest-visit record.

        ``requester_id`` restricts the checkout to the record's submitter;
        pass None when staff perform it.
        """
        self._check_pin(pin, self.settings.GUEST_CHECKOUT_PIN, f"guest checkout of {request_id}")

        guest = self.get(RequestKind.guest, request_id)
        if requester_id is not None and guest.get("user_id") != requester_id:
            raise UnauthorizedError("You can only check out your own guests")
        if GUEST.is_terminal(guest["status"]):
            raise AlreadyFinalizedError(f"Guest {request_id} is already checked out")

        now = self._next_updated_at(guest)
        updated = self.store.update(
            GUEST.collection,
            request_id,
            {
                "status": GuestStatus.checked_out.value,
                "checkout_time": now,
                "updated_at": now,
            },
            expected={"status": guest["status"]},
        )
        if updated is None:
            raise ConflictError(f"Guest {request_id} was changed by someone else; reload and retry")

        logger.info(f"Guest record {request_id} checked out")
        self._notify(GUEST, updated, GUEST.describe_change(updated, GuestStatus.checked_out.value), title="Guest Checkout")
        return updated

    # =========================================================
    # Helpers
    # =========================================================
    def _check_pin(self, pin, expected: str, context: str):
        supplied = str(pin or "").strip()
        if not supplied or not secrets.compare_digest(supplied, str(expected)):
            logger.warning(f"Invalid security code for {context}")
            raise InvalidPinError("Invalid security code")

    def _within_stay(self, sleepover: dict, now: datetime) -> bool:
        start = parse_date(sleepover.get("start_date"))
        end = parse_date(sleepover.get("end_date"))
        if not start or not end:
            return False
        window_start, _ = day_window(start, self.tz)
        _, window_end = day_window(end, self.tz)
        return window_start <= now < window_end

    def _next_updated_at(self, document: dict) -> datetime:
        now = self.clock()
        previous = parse_timestamp(document.get("updated_at"))
        if previous and previous > now:
            return previous
        return now

    def _notify(self, lifecycle: Lifecycle, document: dict, message: str, title: Optional[str] = None):
        self.notifier.dispatch(
            document.get("user_id"),
            lifecycle.notification_type,
            title or lifecycle.notification_title,
            message,
        )


def _require(data: dict, fields, prefix: str = ""):
    if not isinstance(data, dict):
        raise ValidationError(f"{prefix.rstrip('.') or 'payload'} must be an object")
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{prefix}{name} is required")


def _as_date(value, name: str):
    try:
        return parse_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")
