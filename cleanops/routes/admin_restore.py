"""
Admin-facing endpoint for checking and running the backup restore.
"""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required

from cleanops.models import UserRole
from cleanops.restore import metrics
from cleanops.restore.errors import RestoreConnectionError, RestoreContextError, TargetIdentityError
from cleanops.restore.pipeline import RestoreContext
from cleanops.restore.service import get_restore_readiness, load_configured_targets, run_backup_restore
from cleanops.utils.permissions import role_required
from cleanops.utils.restore import is_restore_enabled

admin_restore_blueprint = Blueprint("admin_restore", __name__, url_prefix="/api/admin")


def _connection_failed(exc: Exception):
    current_app.logger.error("Restore database connection failed: %s", exc)
    return (
        jsonify({"success": False, "error": "Database connection failed. Please try again later."}),
        HTTPStatus.SERVICE_UNAVAILABLE,
    )


def _configuration_error(exc: Exception):
    current_app.logger.error("Restore is misconfigured: %s", exc)
    return jsonify({"success": False, "error": str(exc)}), HTTPStatus.INTERNAL_SERVER_ERROR


@admin_restore_blueprint.get("/restore-from-backup")
@login_required
@role_required(UserRole.OWNER, UserRole.ADMIN)
def restore_readiness():
    """Report how many target clients exist and whether the exports are present."""
    if not is_restore_enabled():
        return jsonify({"success": False, "error": "Restore is disabled."}), HTTPStatus.NOT_FOUND
    try:
        targets = load_configured_targets(current_app)
        payload = get_restore_readiness(current_app, current_user.company_id, targets)
    except RestoreConnectionError as exc:
        return _connection_failed(exc)
    except TargetIdentityError as exc:
        return _configuration_error(exc)
    except Exception as exc:
        current_app.logger.error(f"Error checking restore readiness: {str(exc)}", exc_info=True)
        return (
            jsonify({"success": False, "error": "Failed to check restore status"}),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )
    return jsonify(payload)


@admin_restore_blueprint.post("/restore-from-backup")
@login_required
@role_required(UserRole.OWNER, UserRole.ADMIN)
def restore_from_backup():
    """Run the restore for the caller's company, attributing records to the caller."""
    if not is_restore_enabled():
        return jsonify({"success": False, "error": "Restore is disabled."}), HTTPStatus.NOT_FOUND
    current_app.logger.info(
        "Restore triggered by user %s for company %s", current_user.id, current_user.company_id
    )
    context = RestoreContext(company_id=current_user.company_id, user_id=current_user.id)
    try:
        targets = load_configured_targets(current_app)
        report = run_backup_restore(current_app, context, targets)
    except RestoreConnectionError as exc:
        metrics.record_restore_run("connection_failed")
        return _connection_failed(exc)
    except (TargetIdentityError, RestoreContextError) as exc:
        return _configuration_error(exc)
    except Exception as exc:
        metrics.record_restore_run("failed")
        current_app.logger.error(f"Restore from backup failed: {str(exc)}", exc_info=True)
        return (
            jsonify({"success": False, "error": "Restore failed", "details": str(exc)}),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    return jsonify(
        {
            "success": True,
            "message": report.message or "Restoration completed",
            "results": report.as_dict(),
        }
    )


def register_restore_admin_routes(app):
    """
    Register restore admin routes when the restore feature flag is enabled.
    """

    if not is_restore_enabled(app):
        return

    if admin_restore_blueprint.name in app.blueprints:
        return

    if getattr(app, "_got_first_request", False):
        app.logger.warning("Restore blueprint registration skipped because the app has already handled its first request.")
        return

    app.register_blueprint(admin_restore_blueprint)
