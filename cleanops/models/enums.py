# cleanops/models/enums.py
"""
Enums for the company, client and booking models.
"""

from enum import Enum as PyEnum


class UserRole(PyEnum):
    """Role of a user within their company"""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    CLEANER = "CLEANER"
    CUSTOMER = "CUSTOMER"


class BookingStatus(PyEnum):
    """Lifecycle status of a booking"""

    SCHEDULED = "SCHEDULED"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class ServiceType(PyEnum):
    """Kind of cleaning performed"""

    STANDARD = "STANDARD"
    DEEP_CLEAN = "DEEP_CLEAN"
    MOVE_IN_OUT = "MOVE_IN_OUT"
    COMMERCIAL = "COMMERCIAL"


class RecurrenceFrequency(PyEnum):
    """How often a booking repeats"""

    NONE = "NONE"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
