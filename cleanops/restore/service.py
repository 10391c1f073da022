"""
Glue between the Flask application and the restore pipeline.

Both trigger surfaces (CLI and admin endpoint) go through these helpers so a
run behaves identically regardless of how it was started.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Sequence

from flask import Flask

from cleanops.models import Company, User, db
from cleanops.models.enums import BookingStatus

from .errors import RestoreContextError, TargetIdentityError
from .pipeline import RestoreContext, RestoreEngine, RestoreReport, SQLAlchemyRestoreStore, restore_from_exports
from .preflight import check_restore_readiness
from .targets import TargetIdentity, load_target_identities


def _config_path(app: Flask, key: str) -> Path | None:
    configured = app.config.get(key)
    if not configured:
        return None
    candidate = Path(configured)
    if candidate.is_absolute():
        return candidate
    return Path(app.root_path) / candidate


def get_bookings_path(app: Flask) -> Path | None:
    return _config_path(app, "RESTORE_BOOKINGS_CSV")


def get_customers_path(app: Flask) -> Path | None:
    return _config_path(app, "RESTORE_CUSTOMERS_CSV")


def get_default_booking_status(app: Flask) -> BookingStatus:
    raw = str(app.config.get("RESTORE_DEFAULT_BOOKING_STATUS") or "SCHEDULED").strip().upper()
    try:
        return BookingStatus[raw]
    except KeyError as exc:
        raise RestoreContextError(f"RESTORE_DEFAULT_BOOKING_STATUS={raw!r} is not a booking status.") from exc


def load_configured_targets(app: Flask, path: str | Path | None = None) -> list[TargetIdentity]:
    """Load the target allow-list from ``path`` or ``RESTORE_TARGETS_FILE``."""

    targets_path = Path(path) if path else _config_path(app, "RESTORE_TARGETS_FILE")
    if targets_path is None:
        raise TargetIdentityError("No target identity file configured. Set RESTORE_TARGETS_FILE.")
    return load_target_identities(targets_path)


def resolve_restore_context(company_id: str) -> RestoreContext:
    """Find the owner/admin restored records are attributed to."""

    SQLAlchemyRestoreStore(db.session).ping()
    company = Company.find_by_id(company_id)
    if company is None:
        raise RestoreContextError(f"Company {company_id} does not exist.")
    admin = User.find_company_admin(company_id)
    if admin is None:
        raise RestoreContextError(f"No admin user found for company {company_id}.")
    return RestoreContext(company_id=company.id, user_id=admin.id)


def build_engine(app: Flask, context: RestoreContext, targets: Sequence[TargetIdentity]) -> RestoreEngine:
    return RestoreEngine(
        SQLAlchemyRestoreStore(db.session),
        context,
        targets,
        default_status=get_default_booking_status(app),
        dedup_window=timedelta(minutes=int(app.config.get("RESTORE_DEDUP_WINDOW_MINUTES", 120))),
        error_limit=int(app.config.get("RESTORE_ERROR_SAMPLE_LIMIT", 10)),
    )


def run_backup_restore(
    app: Flask,
    context: RestoreContext,
    targets: Sequence[TargetIdentity],
    *,
    bookings_path: str | Path | None = None,
    customers_path: str | Path | None = None,
) -> RestoreReport:
    engine = build_engine(app, context, targets)
    return restore_from_exports(
        engine,
        bookings_path=bookings_path if bookings_path is not None else get_bookings_path(app),
        customers_path=customers_path if customers_path is not None else get_customers_path(app),
    )


def get_restore_readiness(app: Flask, company_id: str, targets: Sequence[TargetIdentity]) -> dict[str, Any]:
    return check_restore_readiness(
        SQLAlchemyRestoreStore(db.session),
        company_id=company_id,
        targets=targets,
        bookings_path=get_bookings_path(app),
        customers_path=get_customers_path(app),
    )
