# -------------------------
# Enums
# -------------------------
from .enums import (
    RequestKind,
    GuestStatus,
    SleepoverStatus,
    MaintenanceStatus,
    ComplaintStatus,
    Priority,
    MaintenanceCategory,
    ComplaintCategory,
    NotificationType,
    AnnouncementStatus,
    Role,
    ApplicationStatus,
    MessageSender,
    PaymentType,
    PaymentStatus,
)

# -------------------------
# Request Models
# -------------------------
from .requests import (
    ComplaintCreate,
    MaintenanceCreate,
    AdditionalSleepoverGuest,
    SleepoverCreate,
    AdditionalVisitGuest,
    GuestVisitCreate,
    TransitionPayload,
    AssignPayload,
    CheckoutPayload,
)

# -------------------------
# Announcement Models
# -------------------------
from .announcement import AnnouncementCreate, AnnouncementUpdate

# -------------------------
# Application Models
# -------------------------
from .application import ApplicationDecision, MessageCreate

# -------------------------
# Admin / Finance Models
# -------------------------
from .admin import AdminCreate, AdminUpdate
from .finance import PaymentCreate, FinanceReportCreate

# -------------------------
# Auth Models
# -------------------------
from .auth import LoginRequest, TokenResponse, RegisterRequest

__all__ = [
    # enums
    "RequestKind",
    "GuestStatus",
    "SleepoverStatus",
    "MaintenanceStatus",
    "ComplaintStatus",
    "Priority",
    "MaintenanceCategory",
    "ComplaintCategory",
    "NotificationType",
    "AnnouncementStatus",
    "Role",
    "ApplicationStatus",
    "MessageSender",
    "PaymentType",
    "PaymentStatus",

    # requests
    "ComplaintCreate",
    "MaintenanceCreate",
    "AdditionalSleepoverGuest",
    "SleepoverCreate",
    "AdditionalVisitGuest",
    "GuestVisitCreate",
    "TransitionPayload",
    "AssignPayload",
    "CheckoutPayload",

    # announcements
    "AnnouncementCreate",
    "AnnouncementUpdate",

    # applications
    "ApplicationDecision",
    "MessageCreate",

    # admins / finance
    "AdminCreate",
    "AdminUpdate",
    "PaymentCreate",
    "FinanceReportCreate",

    # auth
    "LoginRequest",
    "TokenResponse",
    "RegisterRequest",
]
