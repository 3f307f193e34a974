from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# REQUEST KIND
# -----------------------------------------------------
class RequestKind(BaseStrEnum):
    """The four request types sharing the lifecycle engine."""

    guest = "guest"
    sleepover = "sleepover"
    maintenance = "maintenance"
    complaint = "complaint"


# -----------------------------------------------------
# STATUS VOCABULARIES
# -----------------------------------------------------
class GuestStatus(BaseStrEnum):
    active = "active"
    checked_out = "checked_out"


class SleepoverStatus(BaseStrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    completed = "completed"


class MaintenanceStatus(BaseStrEnum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"


class ComplaintStatus(BaseStrEnum):
    pending = "pending"
    in_progress = "in_progress"
    resolved = "resolved"
    rejected = "rejected"


# -----------------------------------------------------
# CATEGORIES / PRIORITY
# -----------------------------------------------------
class Priority(BaseStrEnum):
    low = "low"
    medium = "medium"
    high = "high"


class MaintenanceCategory(BaseStrEnum):
    bedroom = "bedroom"
    bathroom = "bathroom"
    kitchen = "kitchen"
    furniture = "furniture"
    other = "other"


class ComplaintCategory(BaseStrEnum):
    maintenance = "maintenance"
    security = "security"
    noise = "noise"
    cleanliness = "cleanliness"
    other = "other"


# -----------------------------------------------------
# NOTIFICATIONS
# -----------------------------------------------------
class NotificationType(BaseStrEnum):
    maintenance = "maintenance"
    complaint = "complaint"
    sleepover = "sleepover"
    guest = "guest"
    message = "message"


# -----------------------------------------------------
# ANNOUNCEMENTS
# -----------------------------------------------------
class AnnouncementStatus(BaseStrEnum):
    active = "active"
    archived = "archived"


# -----------------------------------------------------
# USERS / APPLICATIONS
# -----------------------------------------------------
class Role(BaseStrEnum):
    student = "student"
    newbie = "newbie"
    admin = "admin"
    superadmin = "superadmin"
    admin_maintenance = "admin-maintenance"
    admin_security = "admin-security"
    admin_complaints = "admin-complaints"
    admin_guest_management = "admin-guest-management"
    admin_finance = "admin-finance"


class ApplicationStatus(BaseStrEnum):
    pending = "pending"
    accepted = "accepted"
    denied = "denied"


class MessageSender(BaseStrEnum):
    admin = "admin"
    student = "student"


# -----------------------------------------------------
# FINANCE
# -----------------------------------------------------
class PaymentType(BaseStrEnum):
    rent = "rent"
    deposit = "deposit"
    fine = "fine"
    other = "other"


class PaymentStatus(BaseStrEnum):
    paid = "paid"
    pending = "pending"
    overdue = "overdue"
