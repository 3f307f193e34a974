# services/finance.py

"""
Student finance: payments, balances and stored statements.

Students are looked up by tenant code, the reference printed on their
lease. Amounts are plain numbers in the residence's currency.
"""

from datetime import date
from typing import Callable, List, Optional

from core.errors import NotFoundError, ValidationError
from core.logging_config import logger
from core.store import EntityStore
from core.utils import parse_date, utcnow
from models.enums import PaymentStatus, PaymentType

USERS_COLLECTION = "users"
PAYMENTS_COLLECTION = "payments"
REPORTS_COLLECTION = "financial_reports"

OUTSTANDING_STATUSES = (PaymentStatus.pending.value, PaymentStatus.overdue.value)


def get_student_by_tenant_code(store: EntityStore, tenant_code: str) -> dict:
    tenant_code = (tenant_code or "").strip()
    if not tenant_code:
        raise ValidationError("tenant_code is required")

    users = store.query(USERS_COLLECTION, [("tenant_code", "eq", tenant_code)])
    if not users:
        raise NotFoundError("Student not found")
    return users[0]


def list_payments(store: EntityStore, user_id: str) -> List[dict]:
    return store.query(
        PAYMENTS_COLLECTION,
        [("user_id", "eq", user_id)],
        order_by="date",
        descending=True,
    )


def get_student_finance(store: EntityStore, tenant_code: str) -> dict:
    """
    Finance summary for one student.

    ``outstanding_balance`` sums pending and overdue payments;
    ``next_payment_due`` is the earliest pending payment date, or None.
    """
    user = get_student_by_tenant_code(store, tenant_code)
    payments = list_payments(store, user["id"])

    outstanding = sum(
        p.get("amount") or 0 for p in payments if p.get("status") in OUTSTANDING_STATUSES
    )
    pending_dates = [
        parse_date(p["date"])
        for p in payments
        if p.get("status") == PaymentStatus.pending.value and p.get("date")
    ]

    return {
        "user_id": user["id"],
        "full_name": " ".join(p for p in (user.get("name"), user.get("surname")) if p),
        "tenant_code": user.get("tenant_code"),
        "room_number": user.get("room_number"),
        "email": user.get("email"),
        "phone": user.get("phone") or "",
        "payment_history": payments,
        "outstanding_balance": outstanding,
        "next_payment_due": min(pending_dates) if pending_dates else None,
    }


def record_payment(
    store: EntityStore,
    user_id: str,
    amount,
    payment_type: str,
    description: Optional[str],
    payment_date,
    status: str,
    recorded_by: str,
    clock: Callable = utcnow,
) -> str:
    if not store.get(USERS_COLLECTION, user_id):
        raise NotFoundError("Student not found")
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise ValidationError("amount must be a number")
    if amount <= 0:
        raise ValidationError("amount must be greater than zero")
    if str(payment_type) not in PaymentType.list():
        raise ValidationError(f"type must be one of: {', '.join(PaymentType.list())}")
    if str(status) not in PaymentStatus.list():
        raise ValidationError(f"status must be one of: {', '.join(PaymentStatus.list())}")
    try:
        payment_date = parse_date(payment_date)
    except (TypeError, ValueError):
        raise ValidationError("date must be a date (YYYY-MM-DD)")
    if payment_date is None:
        raise ValidationError("date is required")

    now = clock()
    payment_id = store.create(
        PAYMENTS_COLLECTION,
        {
            "user_id": user_id,
            "amount": amount,
            "type": str(payment_type),
            "description": (description or "").strip(),
            "date": payment_date,
            "status": str(status),
            "recorded_by": recorded_by,
            "created_at": now,
            "updated_at": now,
        },
    )
    logger.info(f"Admin {recorded_by} recorded {status} {payment_type} payment {payment_id} for user {user_id}")
    return payment_id


# ============================================================
# STATEMENTS
# ============================================================
def list_finance_reports(store: EntityStore, user_id: str) -> List[dict]:
    return store.query(
        REPORTS_COLLECTION,
        [("user_id", "eq", user_id)],
        order_by="report_date",
        descending=True,
    )


def create_finance_report(
    store: EntityStore,
    tenant_code: str,
    content: str,
    created_by: str,
    report_date: Optional[date] = None,
    clock: Callable = utcnow,
) -> str:
    """Store a plain-text statement against the student with this tenant code."""
    content = (content or "").strip()
    if not content:
        raise ValidationError("content is required")

    user = get_student_by_tenant_code(store, tenant_code)
    now = clock()
    report_id = store.create(
        REPORTS_COLLECTION,
        {
            "user_id": user["id"],
            "tenant_code": user.get("tenant_code"),
            "report_date": report_date or now.date(),
            "report_data": content,
            "created_by": created_by,
            "created_at": now,
        },
    )
    logger.info(f"Finance statement {report_id} stored for tenant {tenant_code}")
    return report_id
