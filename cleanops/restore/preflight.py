"""
Pre-flight readiness check for the backup restore.

Reports how many target clients already exist and whether both exports are in
place, without writing anything.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from .pipeline.storage import RestoreStore
from .targets import TargetIdentity


def _file_status(path: str | Path | None) -> dict[str, Any]:
    if path is None:
        return {"exists": False, "path": None}
    file_path = Path(path)
    return {"exists": file_path.is_file(), "path": str(file_path)}


def check_restore_readiness(
    store: RestoreStore,
    *,
    company_id: str,
    targets: Sequence[TargetIdentity],
    bookings_path: str | Path | None,
    customers_path: str | Path | None,
) -> dict[str, Any]:
    store.ping()
    target_ids = [target.id for target in targets]
    existing = store.count_existing_clients(target_ids)
    missing = len(target_ids) - existing
    existing_bookings = store.count_bookings_for_clients(company_id, target_ids)

    if missing > 0:
        message = f"{missing} clients need restoration. POST to this endpoint to restore."
    else:
        message = f"All {len(target_ids)} target clients already exist in database."

    return {
        "success": True,
        "targetClients": {
            "total": len(target_ids),
            "existing": existing,
            "missing": missing,
        },
        "existingBookingsForTargetClients": existing_bookings,
        "backupFiles": {
            "customers": _file_status(customers_path),
            "bookings": _file_status(bookings_path),
        },
        "message": message,
    }
