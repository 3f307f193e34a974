# routers/finance.py

from fastapi import APIRouter, Depends

from dependencies.auth import get_current_user, CurrentUser
from core.errors import UnauthorizedError
from core.permission_helpers import has_permission, requires_permission
from core.store import EntityStore, get_store
from models.finance import FinanceReportCreate, PaymentCreate
from services.finance import (
    create_finance_report,
    get_student_finance,
    list_finance_reports,
    record_payment,
)

router = APIRouter(
    prefix="/finance",
    tags=["Finance"],
)


# -----------------------------------------------------
# GET /finance/students/{tenant_code}
# Finance staff, or the student holding that tenant code
# -----------------------------------------------------
@router.get("/students/{tenant_code}", summary="Finance summary for one student")
def get_finance_summary(
    tenant_code: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    if not has_permission(current_user, "finance:read") and current_user.tenant_code != tenant_code:
        raise UnauthorizedError("You can only view your own finances")
    return {"success": True, "finance": get_student_finance(store, tenant_code)}


@router.post("/payments", summary="Record a payment or a charge")
def post_payment(
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(requires_permission("finance:write")),
    store: EntityStore = Depends(get_store),
):
    payment_id = record_payment(
        store,
        payload.user_id,
        payload.amount,
        payload.type,
        payload.description,
        payload.date,
        payload.status,
        recorded_by=current_user.id,
    )
    return {"success": True, "id": payment_id}


# -----------------------------------------------------
# Statements
# -----------------------------------------------------
@router.get("/reports/{user_id}", summary="Stored finance statements for one student")
def get_finance_reports(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    if not has_permission(current_user, "finance:read") and current_user.id != user_id:
        raise UnauthorizedError("You can only view your own statements")
    return {"success": True, "reports": list_finance_reports(store, user_id)}


@router.post("/reports/{tenant_code}", summary="Store a finance statement for a student")
def post_finance_report(
    tenant_code: str,
    payload: FinanceReportCreate,
    current_user: CurrentUser = Depends(requires_permission("finance:write")),
    store: EntityStore = Depends(get_store),
):
    report_id = create_finance_report(
        store,
        tenant_code,
        payload.content,
        created_by=current_user.id,
        report_date=payload.report_date,
    )
    return {"success": True, "id": report_id}
