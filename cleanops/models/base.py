# cleanops/models/base.py

from datetime import datetime, timezone
from uuid import uuid4

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    """Naive UTC timestamp; every datetime column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_id():
    return uuid4().hex


class BaseModel(db.Model):
    """Abstract base adding string primary keys and audit timestamps"""

    __abstract__ = True

    id = db.Column(db.String(64), primary_key=True, default=generate_id)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
