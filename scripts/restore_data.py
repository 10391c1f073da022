#!/usr/bin/env python3
"""
Restore target clients and their bookings from backup CSV exports.

Usage:
    Set DATABASE_URL (or rely on the development SQLite database) and
    RESTORE_TARGETS_FILE, then:
    python scripts/restore_data.py --company-id <id> \
        --bookings backups/bookings.csv --customers backups/customers.csv
"""

import argparse
import json
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app import app  # noqa: E402
from cleanops.models import Company  # noqa: E402
from cleanops.restore.errors import (  # noqa: E402
    RestoreConnectionError,
    RestoreContextError,
    TargetIdentityError,
)
from cleanops.restore.pipeline import format_report  # noqa: E402
from cleanops.restore.service import (  # noqa: E402
    load_configured_targets,
    resolve_restore_context,
    run_backup_restore,
)


def _print_companies():
    companies = Company.query.order_by(Company.name).all()
    if not companies:
        print("No companies exist yet.")
        return
    print("Available companies:")
    for company in companies:
        print(f"  {company.id}: {company.name}")


def restore(company_id, bookings_path=None, customers_path=None, targets_path=None, as_json=False):
    """Run the restore inside an app context. Returns the process exit code."""
    with app.app_context():
        try:
            targets = load_configured_targets(app, targets_path)
        except TargetIdentityError as exc:
            print(f"Error: {exc}")
            return 1

        try:
            context = resolve_restore_context(company_id)
        except RestoreConnectionError as exc:
            print(f"Error: {exc}")
            return 1
        except RestoreContextError as exc:
            print(f"Error: {exc}")
            _print_companies()
            return 1

        if not as_json:
            print(f"Restoring {len(targets)} target clients for company {context.company_id} (user {context.user_id})")

        try:
            report = run_backup_restore(
                app,
                context,
                targets,
                bookings_path=bookings_path,
                customers_path=customers_path,
            )
        except RestoreConnectionError as exc:
            print(f"Error: {exc}")
            return 1
        except Exception as exc:
            app.logger.exception("Restore failed")
            print(f"Error: restore failed: {exc}")
            return 1

        if as_json:
            print(json.dumps(report.as_dict(), indent=2))
        else:
            print(format_report(report))
        return 0


def main():
    """Command-line interface"""
    parser = argparse.ArgumentParser(description="Restore clients and bookings from backup exports")
    parser.add_argument(
        "--company-id",
        default=os.environ.get("RESTORE_COMPANY_ID"),
        help="Company the restored records belong to (default: RESTORE_COMPANY_ID)",
    )
    parser.add_argument("--bookings", help="Bookings export CSV (default: RESTORE_BOOKINGS_CSV)")
    parser.add_argument("--customers", help="Customers export CSV (default: RESTORE_CUSTOMERS_CSV)")
    parser.add_argument("--targets", help="Target identity JSON file (default: RESTORE_TARGETS_FILE)")
    parser.add_argument("--json", action="store_true", help="Print the run report as JSON")

    args = parser.parse_args()

    if not args.company_id:
        parser.error("--company-id is required (or set RESTORE_COMPANY_ID)")

    sys.exit(
        restore(
            args.company_id,
            bookings_path=args.bookings,
            customers_path=args.customers,
            targets_path=args.targets,
            as_json=args.json,
        )
    )


if __name__ == "__main__":
    main()
