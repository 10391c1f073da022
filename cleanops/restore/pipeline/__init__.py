"""Backup restore pipeline stages."""

from __future__ import annotations

from .addresses import ADDRESS_PLACEHOLDER, CITY_PLACEHOLDER, AddressBook, ResolvedAddress, resolve_booking_address
from .engine import (
    DEFAULT_DEDUP_WINDOW,
    BookingDraft,
    RestoreContext,
    RestoreEngine,
    build_booking_draft,
    read_export,
    restore_from_exports,
)
from .mappers import (
    DEFAULT_DURATION_MINUTES,
    Recurrence,
    map_booking_status,
    map_recurrence,
    map_service_type,
    map_status_keyword,
    parse_currency,
    parse_duration,
    parse_iso_datetime,
    parse_scheduled_date,
)
from .matcher import TargetMatch, match_target_identity, resolve_target_match
from .normalize import compose_full_name, normalize_email, normalize_name, normalize_phone, unwrap_excel_text
from .report import RestoreReport, format_report
from .rows import BookingExportRow, CustomerExportRow, SourceRow, booking_rows, customer_rows
from .storage import AddressPayload, BookingPayload, ClientPayload, RestoreStore, SQLAlchemyRestoreStore
from .tokenizer import parse_csv_text, split_csv_line

__all__ = [
    "ADDRESS_PLACEHOLDER",
    "CITY_PLACEHOLDER",
    "AddressBook",
    "AddressPayload",
    "BookingDraft",
    "BookingExportRow",
    "BookingPayload",
    "ClientPayload",
    "CustomerExportRow",
    "DEFAULT_DEDUP_WINDOW",
    "DEFAULT_DURATION_MINUTES",
    "Recurrence",
    "ResolvedAddress",
    "RestoreContext",
    "RestoreEngine",
    "RestoreReport",
    "RestoreStore",
    "SQLAlchemyRestoreStore",
    "SourceRow",
    "TargetMatch",
    "booking_rows",
    "build_booking_draft",
    "compose_full_name",
    "customer_rows",
    "format_report",
    "map_booking_status",
    "map_recurrence",
    "map_service_type",
    "map_status_keyword",
    "match_target_identity",
    "normalize_email",
    "normalize_name",
    "normalize_phone",
    "parse_csv_text",
    "parse_currency",
    "parse_duration",
    "parse_iso_datetime",
    "parse_scheduled_date",
    "read_export",
    "resolve_booking_address",
    "resolve_target_match",
    "restore_from_exports",
    "split_csv_line",
    "unwrap_excel_text",
]
