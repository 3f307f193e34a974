# services/reports.py

"""Daily activity counts per request kind, for the admin dashboard."""

from datetime import date
from typing import Dict

from core.store import EntityStore
from core.utils import day_window
from services.lifecycles import LIFECYCLES


def daily_summary(store: EntityStore, day: date, tz) -> Dict[str, dict]:
    start, end = day_window(day, tz)
    summary = {"date": day.isoformat()}

    for kind, lifecycle in LIFECYCLES.items():
        requests = store.query(
            lifecycle.collection,
            [("created_at", "gte", start), ("created_at", "lt", end)],
        )
        statuses = [r.get("status") for r in requests]
        summary[kind.value] = {
            "total": len(statuses),
            "pending": statuses.count(lifecycle.initial),
            "resolved": sum(1 for s in statuses if s in lifecycle.resolved_states),
            "denied": sum(1 for s in statuses if s in lifecycle.denied_states),
        }

    return summary
