# services/lifecycles.py

"""
State tables for the four request kinds.

Transitions are data: each kind lists its states, its initial and terminal
states and the targets reachable from every non-terminal state. The engine
never branches on kind to decide whether a move is legal.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Tuple

from models.enums import (
    ComplaintStatus,
    GuestStatus,
    MaintenanceStatus,
    NotificationType,
    RequestKind,
    SleepoverStatus,
)


class _Blank(dict):
    def __missing__(self, key):
        return ""


@dataclass(frozen=True)
class Lifecycle:
    kind: RequestKind
    collection: str
    states: Tuple[str, ...]
    initial: str
    terminal: FrozenSet[str]
    transitions: Dict[str, FrozenSet[str]]
    required_fields: Tuple[str, ...]
    notification_type: NotificationType
    notification_title: str
    notification_message: str
    # Outcome buckets used by the daily report
    resolved_states: FrozenSet[str] = field(default_factory=frozenset)
    denied_states: FrozenSet[str] = field(default_factory=frozenset)
    # Whether staff can be assigned to work the request
    assignable: bool = False

    def has_state(self, status: str) -> bool:
        return status in self.states

    def is_terminal(self, status: str) -> bool:
        return status in self.terminal

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.transitions.get(current, frozenset())

    def describe_change(self, document: dict, status: str) -> str:
        values = _Blank(document)
        values["status"] = status
        return self.notification_message.format_map(values)


GUEST = Lifecycle(
    kind=RequestKind.guest,
    collection="guest_requests",
    states=tuple(GuestStatus.list()),
    initial=GuestStatus.active.value,
    terminal=frozenset({GuestStatus.checked_out.value}),
    transitions={
        GuestStatus.active.value: frozenset({GuestStatus.checked_out.value}),
    },
    required_fields=("first_name", "last_name", "phone_number", "room_number", "purpose", "from_date"),
    notification_type=NotificationType.guest,
    notification_title="Guest Registration Update",
    notification_message="Your guest {first_name} {last_name} has been {status}",
    resolved_states=frozenset({GuestStatus.checked_out.value}),
)

SLEEPOVER = Lifecycle(
    kind=RequestKind.sleepover,
    collection="sleepover_requests",
    states=tuple(SleepoverStatus.list()),
    initial=SleepoverStatus.pending.value,
    terminal=frozenset({SleepoverStatus.rejected.value, SleepoverStatus.completed.value}),
    transitions={
        SleepoverStatus.pending.value: frozenset(
            {SleepoverStatus.approved.value, SleepoverStatus.rejected.value}
        ),
        SleepoverStatus.approved.value: frozenset({SleepoverStatus.completed.value}),
    },
    required_fields=(
        "guest_name",
        "guest_surname",
        "guest_phone_number",
        "room_number",
        "start_date",
        "end_date",
    ),
    notification_type=NotificationType.sleepover,
    notification_title="Sleepover Request Update",
    notification_message="Your sleepover request for {guest_name} has been {status}",
    resolved_states=frozenset({SleepoverStatus.approved.value, SleepoverStatus.completed.value}),
    denied_states=frozenset({SleepoverStatus.rejected.value}),
)

MAINTENANCE = Lifecycle(
    kind=RequestKind.maintenance,
    collection="maintenance_requests",
    states=tuple(MaintenanceStatus.list()),
    initial=MaintenanceStatus.pending.value,
    terminal=frozenset({MaintenanceStatus.completed.value}),
    transitions={
        MaintenanceStatus.pending.value: frozenset(
            {MaintenanceStatus.in_progress.value, MaintenanceStatus.completed.value}
        ),
        MaintenanceStatus.in_progress.value: frozenset({MaintenanceStatus.completed.value}),
    },
    required_fields=("title", "description", "room_number"),
    notification_type=NotificationType.maintenance,
    notification_title="Maintenance Request Update",
    notification_message='Your maintenance request "{title}" has been {status}',
    resolved_states=frozenset({MaintenanceStatus.completed.value}),
    assignable=True,
)

COMPLAINT = Lifecycle(
    kind=RequestKind.complaint,
    collection="complaints",
    states=tuple(ComplaintStatus.list()),
    initial=ComplaintStatus.pending.value,
    terminal=frozenset({ComplaintStatus.resolved.value, ComplaintStatus.rejected.value}),
    transitions={
        ComplaintStatus.pending.value: frozenset(
            {
                ComplaintStatus.in_progress.value,
                ComplaintStatus.resolved.value,
                ComplaintStatus.rejected.value,
            }
        ),
        ComplaintStatus.in_progress.value: frozenset(
            {ComplaintStatus.resolved.value, ComplaintStatus.rejected.value}
        ),
    },
    required_fields=("title", "description"),
    notification_type=NotificationType.complaint,
    notification_title="Complaint Update",
    notification_message='Your complaint "{title}" has been {status}',
    resolved_states=frozenset({ComplaintStatus.resolved.value}),
    denied_states=frozenset({ComplaintStatus.rejected.value}),
    assignable=True,
)


LIFECYCLES: Dict[RequestKind, Lifecycle] = {
    lc.kind: lc for lc in (GUEST, SLEEPOVER, MAINTENANCE, COMPLAINT)
}


def lifecycle_for(kind) -> Lifecycle:
    return LIFECYCLES[RequestKind(kind)]
