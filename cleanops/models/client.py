# cleanops/models/client.py
"""
Client and address models.
"""

from .base import BaseModel, db


class Client(BaseModel):
    """A customer of a cleaning company"""

    __tablename__ = "clients"

    company_id = db.Column(db.String(64), db.ForeignKey("companies.id"), nullable=False, index=True)
    user_id = db.Column(db.String(64), db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=True, index=True)
    phone = db.Column(db.String(40), nullable=True, index=True)

    company = db.relationship("Company", back_populates="clients")
    addresses = db.relationship("Address", back_populates="client", cascade="all, delete-orphan")
    bookings = db.relationship("Booking", back_populates="client")

    def __repr__(self):
        return f"<Client {self.name}>"


class Address(BaseModel):
    """Service address for a client"""

    __tablename__ = "addresses"

    client_id = db.Column(db.String(64), db.ForeignKey("clients.id"), nullable=False, index=True)
    label = db.Column(db.String(50), nullable=False, default="Home")
    street = db.Column(db.String(255), nullable=False)
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(50), nullable=False, default="")
    zip = db.Column(db.String(20), nullable=False, default="")

    client = db.relationship("Client", back_populates="addresses")

    def __repr__(self):
        return f"<Address {self.street}, {self.city}>"

    def get_full_address(self):
        """Get formatted full address"""
        locality = " ".join(part for part in (self.state, self.zip) if part)
        parts = [self.street, self.city]
        if locality:
            parts.append(locality)
        return ", ".join(parts)
