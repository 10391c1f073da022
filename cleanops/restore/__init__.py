"""
Backup restore feature package.

Rebuilds a company's clients and bookings from third-party booking exports
after accidental data loss. CLI registration is conditional on
``RESTORE_ENABLED``; the admin endpoint is mounted by ``cleanops.routes``.
"""

from __future__ import annotations

from flask import Flask

from cleanops.utils.restore import is_restore_enabled

from .cli import get_disabled_restore_group, restore_cli
from .errors import (
    RestoreConnectionError,
    RestoreContextError,
    RestoreError,
    RestoreStoreError,
    TargetIdentityError,
)
from .service import get_bookings_path, get_customers_path

RESTORE_EXTENSION_KEY = "restore"

__all__ = [
    "init_restore",
    "RESTORE_EXTENSION_KEY",
    "RestoreError",
    "RestoreConnectionError",
    "RestoreContextError",
    "RestoreStoreError",
    "TargetIdentityError",
]


def _ensure_extension_state(app: Flask) -> dict:
    return app.extensions.setdefault(
        RESTORE_EXTENSION_KEY,
        {
            "enabled": False,
            "bookings_path": None,
            "customers_path": None,
        },
    )


def _set_cli(app: Flask, enabled: bool) -> None:
    """Register the appropriate CLI group based on flag state."""
    # Avoid duplicate registrations when running tests
    command_name = restore_cli.name
    if command_name in app.cli.commands:
        app.cli.commands.pop(command_name)

    if enabled:
        app.cli.add_command(restore_cli)
    else:
        app.cli.add_command(get_disabled_restore_group())


def init_restore(app: Flask) -> None:
    """
    Mount the restore CLI based on configuration.

    Records the resolved export locations inside ``app.extensions['restore']``.
    """
    enabled = is_restore_enabled(app)
    state = _ensure_extension_state(app)
    state["enabled"] = enabled

    if not enabled:
        _set_cli(app, enabled=False)
        app.logger.info("Restore disabled via RESTORE_ENABLED flag; skipping registration.")
        return

    bookings_path = get_bookings_path(app)
    customers_path = get_customers_path(app)
    state.update({"bookings_path": bookings_path, "customers_path": customers_path})

    for label, path in (("bookings", bookings_path), ("customers", customers_path)):
        if path is None:
            app.logger.warning("Restore %s export is not configured.", label)
        elif not path.exists():
            app.logger.warning("Restore %s export not found at %s", label, path)

    _set_cli(app, enabled=True)
    app.logger.info("Restore enabled (bookings=%s, customers=%s)", bookings_path, customers_path)
