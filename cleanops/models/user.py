# cleanops/models/user.py

from flask_login import UserMixin
from sqlalchemy import Enum

from .base import BaseModel, db
from .enums import UserRole

ADMIN_ROLES = (UserRole.OWNER, UserRole.ADMIN)


class User(BaseModel, UserMixin):
    """Platform user belonging to a single company"""

    __tablename__ = "users"

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=True)
    password_hash = db.Column(db.String(255), nullable=True)
    role = db.Column(Enum(UserRole, name="user_role_enum"), default=UserRole.CLEANER, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    company_id = db.Column(db.String(64), db.ForeignKey("companies.id"), nullable=False, index=True)

    company = db.relationship("Company", back_populates="users")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES

    @staticmethod
    def find_company_admin(company_id):
        """Return the first active owner/admin of a company, owners first."""
        admins = (
            User.query.filter(
                User.company_id == company_id,
                User.role.in_(ADMIN_ROLES),
                User.is_active.is_(True),
            )
            .order_by(User.created_at, User.id)
            .all()
        )
        for role in ADMIN_ROLES:
            for user in admins:
                if user.role == role:
                    return user
        return None
