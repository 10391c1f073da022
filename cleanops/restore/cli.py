"""
CLI commands for the backup restore.

Mounted on the Flask CLI as ``flask restore``; connection settings come from
the process environment through the application config.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click
from flask import current_app
from flask.cli import ScriptInfo, with_appcontext

from cleanops.models import Company
from cleanops.utils.restore import is_restore_enabled

from . import metrics
from .errors import RestoreConnectionError, RestoreContextError, TargetIdentityError
from .pipeline import format_report
from .service import (
    get_restore_readiness,
    load_configured_targets,
    resolve_restore_context,
    run_backup_restore,
)

_EXISTING_PATH = click.Path(exists=True, dir_okay=False, path_type=Path)
_EXPORT_PATH = click.Path(dir_okay=False, path_type=Path)


@click.group(name="restore", invoke_without_command=True)
@click.pass_context
def restore_cli(ctx):
    """
    Backup restore commands.

    Displays the configured export locations when invoked without a subcommand.
    """
    info = ctx.ensure_object(ScriptInfo)
    app = info.load_app()
    if not is_restore_enabled(app):
        raise click.ClickException("Restore is disabled via RESTORE_ENABLED=false. Enable it to run restore commands.")
    if ctx.invoked_subcommand is None:
        click.echo(f"Bookings export : {app.config.get('RESTORE_BOOKINGS_CSV') or 'not configured'}")
        click.echo(f"Customers export: {app.config.get('RESTORE_CUSTOMERS_CSV') or 'not configured'}")
        click.echo(f"Target list     : {app.config.get('RESTORE_TARGETS_FILE') or 'not configured'}")


def get_disabled_restore_group() -> click.Group:
    """
    Return a minimal command group that informs the operator the restore is disabled.
    """

    @click.group(name="restore", invoke_without_command=True)
    def disabled_group():
        raise click.ClickException("Restore commands are unavailable because RESTORE_ENABLED=false.")

    return disabled_group


def _available_companies_hint(limit: int = 10) -> str:
    companies = Company.query.order_by(Company.name).limit(limit).all()
    if not companies:
        return "No companies exist yet."
    lines = ["Available companies:"]
    lines.extend(f"  {company.id}: {company.name}" for company in companies)
    return "\n".join(lines)


def _load_targets(targets_path: Optional[Path]):
    try:
        return load_configured_targets(current_app, targets_path)
    except TargetIdentityError as exc:
        raise click.ClickException(str(exc)) from exc


@restore_cli.command("run")
@click.option("--company-id", required=True, help="Company the restored records belong to.")
@click.option("--bookings", "bookings_path", type=_EXPORT_PATH, help="Bookings export CSV.")
@click.option("--customers", "customers_path", type=_EXPORT_PATH, help="Customers export CSV.")
@click.option("--targets", "targets_path", type=_EXISTING_PATH, help="JSON list of target client identities.")
@click.option("--json", "as_json", is_flag=True, help="Print the run report as JSON.")
@with_appcontext
def restore_run_command(
    company_id: str,
    bookings_path: Optional[Path],
    customers_path: Optional[Path],
    targets_path: Optional[Path],
    as_json: bool,
):
    """Restore target clients and their bookings from backup exports."""

    targets = _load_targets(targets_path)

    try:
        context = resolve_restore_context(company_id)
    except RestoreConnectionError as exc:
        metrics.record_restore_run("connection_failed")
        raise click.ClickException(str(exc)) from exc
    except RestoreContextError as exc:
        raise click.ClickException(f"{exc}\n{_available_companies_hint()}") from exc

    if not as_json:
        click.echo(f"Restoring {len(targets)} target clients for company {context.company_id}...")

    try:
        report = run_backup_restore(
            current_app,
            context,
            targets,
            bookings_path=bookings_path,
            customers_path=customers_path,
        )
    except RestoreConnectionError as exc:
        metrics.record_restore_run("connection_failed")
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:
        metrics.record_restore_run("failed")
        current_app.logger.exception("Restore run failed for company %s", company_id)
        raise click.ClickException(f"Restore failed: {exc}") from exc

    if as_json:
        click.echo(json.dumps(report.as_dict(), indent=2))
    else:
        click.echo(format_report(report))


@restore_cli.command("check")
@click.option("--company-id", required=True, help="Company to check.")
@click.option("--targets", "targets_path", type=_EXISTING_PATH, help="JSON list of target client identities.")
@with_appcontext
def restore_check_command(company_id: str, targets_path: Optional[Path]):
    """Report how many target clients exist and whether the exports are present."""

    targets = _load_targets(targets_path)
    try:
        readiness = get_restore_readiness(current_app, company_id, targets)
    except RestoreConnectionError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(readiness, indent=2))
