import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field

from models.enums import PaymentStatus, PaymentType


# -----------------------------------------------------
# PAYMENTS
# -----------------------------------------------------
class PaymentCreate(BaseModel):
    user_id: str
    amount: float = Field(..., gt=0)
    type: PaymentType = PaymentType.rent
    description: Optional[str] = None
    date: dt.date                   # Due date, or the day it was paid
    status: PaymentStatus = PaymentStatus.pending


# -----------------------------------------------------
# STATEMENTS
# -----------------------------------------------------
class FinanceReportCreate(BaseModel):
    content: str
    report_date: Optional[dt.date] = None
