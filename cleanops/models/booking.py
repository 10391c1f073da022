# cleanops/models/booking.py

from sqlalchemy import Enum, Index

from .base import BaseModel, db
from .enums import BookingStatus, RecurrenceFrequency, ServiceType


class Booking(BaseModel):
    """A scheduled cleaning job"""

    __tablename__ = "bookings"

    company_id = db.Column(db.String(64), db.ForeignKey("companies.id"), nullable=False)
    user_id = db.Column(db.String(64), db.ForeignKey("users.id"), nullable=False)
    client_id = db.Column(db.String(64), db.ForeignKey("clients.id"), nullable=False)
    address_id = db.Column(db.String(64), db.ForeignKey("addresses.id"), nullable=False)

    scheduled_date = db.Column(db.DateTime, nullable=False)
    duration = db.Column(db.Integer, nullable=False, default=120)  # minutes
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    status = db.Column(
        Enum(BookingStatus, name="booking_status_enum"),
        default=BookingStatus.SCHEDULED,
        nullable=False,
    )
    service_type = db.Column(
        Enum(ServiceType, name="service_type_enum"),
        default=ServiceType.STANDARD,
        nullable=False,
    )
    is_recurring = db.Column(db.Boolean, default=False, nullable=False)
    recurrence_frequency = db.Column(
        Enum(RecurrenceFrequency, name="recurrence_frequency_enum"),
        default=RecurrenceFrequency.NONE,
        nullable=False,
    )
    notes = db.Column(db.Text, nullable=True)
    internal_notes = db.Column(db.Text, nullable=True)  # Staff-only notes
    is_paid = db.Column(db.Boolean, default=False, nullable=False)
    payment_method = db.Column(db.String(50), nullable=True)

    client = db.relationship("Client", back_populates="bookings")
    address = db.relationship("Address")

    __table_args__ = (Index("idx_booking_company_client_date", "company_id", "client_id", "scheduled_date"),)

    def __repr__(self):
        return f"<Booking {self.client_id} @ {self.scheduled_date:%Y-%m-%d %H:%M} ({self.status.value})>"
