"""
Reconciliation engine restoring clients, addresses and bookings from exports.

Stages before persistence are pure (tokenize, type, match, map); this module
drives them row by row and performs create-if-absent writes through a
:class:`~cleanops.restore.pipeline.storage.RestoreStore`. Rows are handled
strictly in file order and every write is committed before the next row is
looked at: the address cache and the existence checks rely on it, and the
engine must never be run twice concurrently against the same company.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Sequence

from cleanops.models.enums import BookingStatus, RecurrenceFrequency, ServiceType

from .. import metrics
from ..errors import RestoreStoreError
from ..targets import TargetIdentity
from .addresses import AddressBook, ResolvedAddress, resolve_booking_address
from .mappers import (
    map_booking_status,
    map_recurrence,
    map_service_type,
    map_status_keyword,
    parse_currency,
    parse_duration,
    parse_scheduled_date,
)
from .matcher import TargetMatch, resolve_target_match
from .report import DEFAULT_ERROR_SAMPLE_LIMIT, RestoreReport
from .rows import BookingExportRow, CustomerExportRow, booking_rows, customer_rows
from .storage import AddressPayload, BookingPayload, ClientPayload, RestoreStore
from .tokenizer import parse_csv_text

logger = logging.getLogger(__name__)

DEFAULT_DEDUP_WINDOW = timedelta(hours=2)


@dataclass(frozen=True)
class RestoreContext:
    """Company and acting user the restored records belong to."""

    company_id: str
    user_id: str


@dataclass(frozen=True)
class BookingDraft:
    """Canonical booking values derived from one matched export row."""

    scheduled_date: datetime | None
    duration: int
    price: float
    status: BookingStatus
    status_defaulted: bool
    service_type: ServiceType
    is_recurring: bool
    recurrence_frequency: RecurrenceFrequency
    notes: str | None
    internal_notes: str | None
    is_paid: bool
    payment_method: str | None


def build_booking_draft(row: BookingExportRow, *, default_status: BookingStatus) -> BookingDraft:
    keyword = map_status_keyword(row.status)
    recurrence = map_recurrence(row.frequency)
    return BookingDraft(
        scheduled_date=parse_scheduled_date(row.scheduled_start),
        duration=parse_duration(row.duration),
        price=parse_currency(row.price),
        status=map_booking_status(row.status, default=default_status),
        status_defaulted=keyword is None,
        service_type=map_service_type(row.service_description),
        is_recurring=recurrence.is_recurring,
        recurrence_frequency=recurrence.frequency,
        notes=row.notes or None,
        internal_notes=row.internal_notes or None,
        is_paid=parse_currency(row.amount_paid) > 0,
        payment_method=row.payment_method or None,
    )


class RestoreEngine:
    """Idempotent restore of a fixed set of target clients and their bookings."""

    def __init__(
        self,
        store: RestoreStore,
        context: RestoreContext,
        targets: Sequence[TargetIdentity],
        *,
        default_status: BookingStatus = BookingStatus.SCHEDULED,
        dedup_window: timedelta = DEFAULT_DEDUP_WINDOW,
        error_limit: int = DEFAULT_ERROR_SAMPLE_LIMIT,
    ) -> None:
        self.store = store
        self.context = context
        self.targets = tuple(targets)
        self.default_status = default_status
        self.dedup_window = dedup_window
        self.error_limit = error_limit
        self._address_cache: dict[str, str] = {}

    def run(
        self,
        bookings: Sequence[BookingExportRow] | None,
        customers: Sequence[CustomerExportRow] | None = None,
    ) -> RestoreReport:
        """
        Restore target clients, then every matched booking row.

        ``bookings`` is None when no bookings export is available; clients are
        still restored. Raises :class:`RestoreConnectionError` before touching
        any row when the datastore is unreachable.
        """

        self.store.ping()
        self._address_cache = {}
        report = RestoreReport.empty(error_limit=self.error_limit)
        report.clients.target = len(self.targets)

        client_ids = self.restore_clients(report)

        if bookings is None:
            report.bookings_file_found = False
            report.customers_file_found = customers is not None
            report.message = "Clients restored. Bookings file not found - skipping booking restoration."
        else:
            report.customers_file_found = customers is not None
            address_book = AddressBook.from_customer_rows(customers or ())
            report.customer_addresses_loaded = len(address_book)
            logger.info("Loaded %s customer address keys", len(address_book))
            self.restore_bookings(bookings, address_book, client_ids, report)
            report.message = f"Data restoration completed for {len(self.targets)} target clients."

        logger.info(
            "Restore finished for company %s (clients restored=%s skipped=%s; "
            "bookings matched=%s restored=%s skipped=%s; errors=%s)",
            self.context.company_id,
            report.clients.restored,
            report.clients.skipped,
            report.bookings.matched,
            report.bookings.restored,
            report.bookings.skipped,
            report.error_count,
        )
        metrics.record_restore_report(report)
        return report

    def restore_clients(self, report: RestoreReport) -> dict[str, str | None]:
        """
        Create missing target clients.

        Returns the client id each target resolved to: its own id, the id of a
        pre-existing client sharing its phone or email, or None when creation
        failed.
        """

        resolved: dict[str, str | None] = {}
        for target in self.targets:
            try:
                if self.store.client_exists(target.id):
                    report.clients.skipped += 1
                    resolved[target.id] = target.id
                    continue

                existing_id = self.store.find_client_by_contact(
                    self.context.company_id,
                    phone=target.phone or None,
                    email=target.email or None,
                )
                if existing_id is not None:
                    report.clients.skipped += 1
                    resolved[target.id] = existing_id
                    logger.info("Target %s already present as client %s", target.name, existing_id)
                    continue

                self.store.create_client(
                    ClientPayload(
                        id=target.id,
                        company_id=self.context.company_id,
                        user_id=self.context.user_id,
                        name=target.name,
                        email=target.email or None,
                        phone=target.phone or None,
                        created_at=target.created_at,
                    )
                )
            except RestoreStoreError as exc:
                resolved[target.id] = None
                report.clients.errors.add(f"{target.name}: {exc}")
                logger.warning("Failed to restore client %s: %s", target.name, exc)
                continue

            resolved[target.id] = target.id
            report.clients.restored += 1
            logger.info("Restored client %s (%s)", target.name, target.id)
        return resolved

    def restore_bookings(
        self,
        rows: Sequence[BookingExportRow],
        address_book: AddressBook,
        client_ids: dict[str, str | None],
        report: RestoreReport,
    ) -> None:
        logger.info("Processing %s booking rows against %s targets", len(rows), len(self.targets))
        for row in rows:
            match = resolve_target_match(row, self.targets)
            if match is None:
                continue
            report.bookings.matched += 1
            report.bookings.matched_by[match.channel] += 1
            self._restore_booking(match, address_book, client_ids, report)

    def _restore_booking(
        self,
        match: TargetMatch,
        address_book: AddressBook,
        client_ids: dict[str, str | None],
        report: RestoreReport,
    ) -> None:
        row, target = match.row, match.target
        # Unrecognised statuses fall back to self.default_status (SCHEDULED unless configured).
        draft = build_booking_draft(row, default_status=self.default_status)
        address = resolve_booking_address(row, target, address_book)

        window = self._dedup_bounds(draft.scheduled_date)
        if draft.scheduled_date is None or window is None:
            report.bookings.unparseable_dates += 1
            logger.debug("Line %s: unparseable booking date %r", row.line_number, row.scheduled_start)
            return

        label = f"{target.name} ({row.scheduled_start})"
        client_id = client_ids.get(target.id)
        if client_id is None:
            report.bookings.errors.add(f"{label}: client was not restored")
            return

        address_id = self._resolve_address_id(client_id, address, label, report)
        if address_id is None:
            return

        window_start, window_end = window
        try:
            existing = self.store.find_booking_in_window(self.context.company_id, client_id, window_start, window_end)
            if existing is not None:
                report.bookings.skipped += 1
                if existing != draft.scheduled_date:
                    report.bookings.window_conflicts.add(
                        f"{label}: skipped, existing booking at {existing:%Y-%m-%d %H:%M} "
                        f"is within {self._window_label()}"
                    )
                return

            self.store.create_booking(
                BookingPayload(
                    company_id=self.context.company_id,
                    user_id=self.context.user_id,
                    client_id=client_id,
                    address_id=address_id,
                    scheduled_date=draft.scheduled_date,
                    duration=draft.duration,
                    price=draft.price,
                    status=draft.status,
                    service_type=draft.service_type,
                    is_recurring=draft.is_recurring,
                    recurrence_frequency=draft.recurrence_frequency,
                    notes=draft.notes,
                    internal_notes=draft.internal_notes,
                    is_paid=draft.is_paid,
                    payment_method=draft.payment_method,
                )
            )
        except RestoreStoreError as exc:
            report.bookings.errors.add(f"{label}: {exc}")
            logger.warning("Failed to restore booking %s: %s", label, exc)
            return

        report.bookings.restored += 1
        if draft.status_defaulted:
            report.bookings.defaulted_status += 1

    def _dedup_bounds(self, scheduled_date: datetime | None) -> tuple[datetime, datetime] | None:
        """Return the duplicate-check window, or None when it leaves the datetime range."""

        if scheduled_date is None:
            return None
        try:
            return scheduled_date - self.dedup_window, scheduled_date + self.dedup_window
        except OverflowError:
            return None

    def _resolve_address_id(
        self,
        client_id: str,
        address: ResolvedAddress,
        label: str,
        report: RestoreReport,
    ) -> str | None:
        cached = self._address_cache.get(client_id)
        if cached is not None:
            return cached

        try:
            address_id = self.store.find_address_id(client_id)
            if address_id is not None:
                report.addresses.reused += 1
            else:
                address_id = self.store.create_address(
                    AddressPayload(
                        client_id=client_id,
                        street=address.street,
                        city=address.city,
                        state=address.state,
                        zip=address.zip,
                    )
                )
                report.addresses.restored += 1
                if address.source == "placeholder":
                    report.addresses.placeholders += 1
        except RestoreStoreError as exc:
            report.addresses.errors.add(f"{label}: {exc}")
            logger.warning("Failed to resolve address for %s: %s", label, exc)
            return None

        self._address_cache[client_id] = address_id
        return address_id

    def _window_label(self) -> str:
        minutes = int(self.dedup_window.total_seconds() // 60)
        if minutes % 60 == 0:
            return f"±{minutes // 60}h"
        return f"±{minutes}min"


def read_export(path: str | Path | None) -> str | None:
    """Return the export's text, or None when the file is absent."""

    if path is None:
        return None
    file_path = Path(path)
    if not file_path.is_file():
        return None
    # Excel cp1252 exports decode lossily.
    return file_path.read_text(encoding="utf-8-sig", errors="replace")


def restore_from_exports(
    engine: RestoreEngine,
    *,
    bookings_path: str | Path | None,
    customers_path: str | Path | None,
) -> RestoreReport:
    """Tokenize both exports from disk and run ``engine`` over them."""

    bookings_text = read_export(bookings_path)
    customers_text = read_export(customers_path)
    bookings = booking_rows(parse_csv_text(bookings_text)) if bookings_text is not None else None
    customers = customer_rows(parse_csv_text(customers_text)) if customers_text is not None else None
    if bookings is not None:
        logger.info("Found %s bookings in backup %s", len(bookings), bookings_path)
    else:
        logger.warning("Bookings export not found at %s", bookings_path)
    return engine.run(bookings, customers)
