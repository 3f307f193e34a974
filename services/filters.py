# services/filters.py

from dataclasses import dataclass
from datetime import datetime
from typing import List, Union

from core.errors import ValidationError
from core.store import Filter
from core.utils import day_window, local_day
from services.lifecycles import Lifecycle


@dataclass(frozen=True)
class AllRequests:
    pass


@dataclass(frozen=True)
class Mine:
    user_id: str


@dataclass(frozen=True)
class PendingOnly:
    pass


@dataclass(frozen=True)
class TodayOnly:
    pass


@dataclass(frozen=True)
class StatusEquals:
    status: str


RequestFilter = Union[AllRequests, Mine, PendingOnly, TodayOnly, StatusEquals]


def build_filters(lifecycle: Lifecycle, request_filter: RequestFilter, now: datetime, tz) -> List[Filter]:
    """Translate a request filter into store filters for ``lifecycle.collection``."""
    if isinstance(request_filter, AllRequests):
        return []

    if isinstance(request_filter, Mine):
        if not request_filter.user_id:
            raise ValidationError("user_id is required")
        return [("user_id", "eq", request_filter.user_id)]

    if isinstance(request_filter, PendingOnly):
        return [("status", "eq", lifecycle.initial)]

    if isinstance(request_filter, TodayOnly):
        # Day boundary computed once per call, in the residence timezone
        start, end = day_window(local_day(now, tz), tz)
        return [("created_at", "gte", start), ("created_at", "lt", end)]

    if isinstance(request_filter, StatusEquals):
        if not lifecycle.has_state(request_filter.status):
            raise ValidationError(
                f"Invalid {lifecycle.kind} status '{request_filter.status}'. "
                f"Must be one of: {', '.join(lifecycle.states)}"
            )
        return [("status", "eq", request_filter.status)]

    raise TypeError(f"Unknown request filter: {request_filter!r}")
