# routers/reports.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from dependencies.auth import CurrentUser
from core.permission_helpers import requires_permission
from core.store import EntityStore, get_store
from core.utils import local_day, residence_tz, utcnow
from services.reports import daily_summary

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


# -----------------------------------------------------
# GET /reports/daily
# Per-kind counts for one residence-local day
# -----------------------------------------------------
@router.get("/daily", summary="Daily request summary")
def get_daily_report(
    day: Optional[date] = Query(None, description="YYYY-MM-DD; defaults to today"),
    current_user: CurrentUser = Depends(requires_permission("reports:read")),
    store: EntityStore = Depends(get_store),
):
    tz = residence_tz()
    day = day or local_day(utcnow(), tz)
    return {"success": True, "report": daily_summary(store, day, tz)}
