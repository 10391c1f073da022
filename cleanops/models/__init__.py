# cleanops/models/__init__.py
"""
Database models package
"""

from .base import BaseModel, db
from .booking import Booking
from .client import Address, Client
from .company import Company
from .enums import BookingStatus, RecurrenceFrequency, ServiceType, UserRole
from .user import ADMIN_ROLES, User

__all__ = [
    "db",
    "BaseModel",
    "Company",
    "User",
    "ADMIN_ROLES",
    "Client",
    "Address",
    "Booking",
    # Enums
    "UserRole",
    "BookingStatus",
    "ServiceType",
    "RecurrenceFrequency",
]
