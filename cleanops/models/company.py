# cleanops/models/company.py

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseModel, db


class Company(BaseModel):
    """A cleaning business operating on the platform"""

    __tablename__ = "companies"

    name = db.Column(db.String(200), nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    users = db.relationship("User", back_populates="company")
    clients = db.relationship("Client", back_populates="company")

    def __repr__(self):
        return f"<Company {self.name}>"

    @staticmethod
    def find_by_id(company_id):
        """Find company by ID with error handling"""
        try:
            return db.session.get(Company, company_id)
        except SQLAlchemyError as e:
            current_app.logger.error(f"Database error finding company by id {company_id}: {str(e)}")
            return None
