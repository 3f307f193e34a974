# core/utils.py

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional, Tuple

import pytz

from core.config import settings


def sanitize(data: dict) -> dict:
    """
    Sanitize form data before it is stored:
    - Strip string whitespace
    - Empty strings → None
    - Nested dicts (e.g. additional guests) are sanitized too
    - Preserve booleans, numbers, dates and None
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped or None
        elif isinstance(v, dict):
            clean[k] = sanitize(v)
        elif isinstance(v, list):
            clean[k] = [sanitize(item) if isinstance(item, dict) else item for item in v]
        else:
            clean[k] = v

    return clean


# -----------------------------------------------------
# Time helpers
# -----------------------------------------------------
def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def residence_tz(name: Optional[str] = None):
    return pytz.timezone(name or settings.RESIDENCE_TIMEZONE)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Convert a stored timestamp (ISO string or datetime) to an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        # PostgREST emits "Z" on some columns; fromisoformat wants an offset
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp value: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_wire(value: Any) -> Any:
    """Serialize dates/datetimes (recursively) into ISO strings for the store."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


def local_day(now: datetime, tz) -> date:
    """Calendar day of ``now`` in the residence timezone."""
    return now.astimezone(tz).date()


def day_window(day: date, tz) -> Tuple[datetime, datetime]:
    """
    UTC bounds of a residence-local calendar day as ``[start, end)``.
    """
    start = tz.localize(datetime.combine(day, time.min))
    end = tz.localize(datetime.combine(day + timedelta(days=1), time.min))
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
