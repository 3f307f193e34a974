# models/requests.py

from typing import List, Optional
from datetime import date
from pydantic import BaseModel, Field

from models.enums import ComplaintCategory, MaintenanceCategory, Priority


# -----------------------------------------------------
# COMPLAINT
# -----------------------------------------------------
class ComplaintCreate(BaseModel):
    title: str
    description: str
    category: ComplaintCategory = ComplaintCategory.other
    location: Optional[str] = None


# -----------------------------------------------------
# MAINTENANCE
# -----------------------------------------------------
class MaintenanceCreate(BaseModel):
    title: str
    description: str
    room_number: Optional[str] = None       # Falls back to the student's room
    category: MaintenanceCategory = MaintenanceCategory.other
    priority: Priority = Priority.medium
    time_slot: Optional[str] = None
    preferred_date: Optional[date] = None


# -----------------------------------------------------
# SLEEPOVER
# -----------------------------------------------------
class AdditionalSleepoverGuest(BaseModel):
    name: str
    surname: str
    phone_number: str


class SleepoverCreate(BaseModel):
    guest_name: str
    guest_surname: str
    guest_phone_number: str
    room_number: Optional[str] = None
    start_date: date
    end_date: date
    tenant_code: Optional[str] = None

    # Length is checked by the engine so the caller gets capacity_exceeded
    additional_guests: List[AdditionalSleepoverGuest] = Field(default_factory=list)


# -----------------------------------------------------
# GUEST VISIT
# -----------------------------------------------------
class AdditionalVisitGuest(BaseModel):
    first_name: str
    last_name: str
    phone_number: str


class GuestVisitCreate(BaseModel):
    first_name: str
    last_name: str
    phone_number: str
    room_number: Optional[str] = None
    purpose: str
    from_date: date
    tenant_code: Optional[str] = None

    additional_guests: List[AdditionalVisitGuest] = Field(default_factory=list)


# -----------------------------------------------------
# ADMIN TRANSITION / CHECKOUT
# -----------------------------------------------------
class TransitionPayload(BaseModel):
    status: str
    admin_response: Optional[str] = None


class AssignPayload(BaseModel):
    staff_id: str


class CheckoutPayload(BaseModel):
    pin: str
