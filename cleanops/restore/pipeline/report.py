"""
Run report aggregated by the restore engine.

Error and warning lists are bounded samples for operator review; the totals
are always kept so a truncated list is never mistaken for the full count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_ERROR_SAMPLE_LIMIT = 10


@dataclass
class BoundedMessages:
    limit: int = DEFAULT_ERROR_SAMPLE_LIMIT
    items: list[str] = field(default_factory=list)
    total: int = 0

    def add(self, message: str) -> None:
        self.total += 1
        if len(self.items) < self.limit:
            self.items.append(message)

    def __len__(self) -> int:
        return self.total


@dataclass
class ClientRestoreCounts:
    target: int = 0
    restored: int = 0
    skipped: int = 0
    errors: BoundedMessages = field(default_factory=BoundedMessages)

    def as_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "restored": self.restored,
            "skipped": self.skipped,
            "errors": list(self.errors.items),
            "errorCount": self.errors.total,
        }


@dataclass
class AddressRestoreCounts:
    restored: int = 0
    reused: int = 0
    placeholders: int = 0
    errors: BoundedMessages = field(default_factory=BoundedMessages)

    def as_dict(self) -> dict[str, Any]:
        return {
            "restored": self.restored,
            "reused": self.reused,
            "placeholders": self.placeholders,
            "errors": list(self.errors.items),
            "errorCount": self.errors.total,
        }


@dataclass
class BookingRestoreCounts:
    matched: int = 0
    restored: int = 0
    skipped: int = 0
    unparseable_dates: int = 0
    defaulted_status: int = 0
    matched_by: dict[str, int] = field(default_factory=lambda: {"phone": 0, "email": 0, "name": 0})
    errors: BoundedMessages = field(default_factory=BoundedMessages)
    window_conflicts: BoundedMessages = field(default_factory=BoundedMessages)

    def as_dict(self) -> dict[str, Any]:
        return {
            "matchedFromBackup": self.matched,
            "restored": self.restored,
            "skipped": self.skipped,
            "unparseableDates": self.unparseable_dates,
            "defaultedStatus": self.defaulted_status,
            "matchedBy": dict(self.matched_by),
            "errors": list(self.errors.items),
            "errorCount": self.errors.total,
            "windowConflicts": list(self.window_conflicts.items),
            "windowConflictCount": self.window_conflicts.total,
        }


@dataclass
class RestoreReport:
    clients: ClientRestoreCounts
    addresses: AddressRestoreCounts
    bookings: BookingRestoreCounts
    bookings_file_found: bool = True
    customers_file_found: bool = True
    customer_addresses_loaded: int = 0
    message: str = ""

    @classmethod
    def empty(cls, *, error_limit: int = DEFAULT_ERROR_SAMPLE_LIMIT) -> "RestoreReport":
        return cls(
            clients=ClientRestoreCounts(errors=BoundedMessages(limit=error_limit)),
            addresses=AddressRestoreCounts(errors=BoundedMessages(limit=error_limit)),
            bookings=BookingRestoreCounts(
                errors=BoundedMessages(limit=error_limit),
                window_conflicts=BoundedMessages(limit=error_limit),
            ),
        )

    @property
    def error_count(self) -> int:
        return self.clients.errors.total + self.addresses.errors.total + self.bookings.errors.total

    def as_dict(self) -> dict[str, Any]:
        return {
            "clients": self.clients.as_dict(),
            "addresses": self.addresses.as_dict(),
            "bookings": self.bookings.as_dict(),
            "backupFiles": {
                "bookingsFound": self.bookings_file_found,
                "customersFound": self.customers_file_found,
                "customerAddressesLoaded": self.customer_addresses_loaded,
            },
            "message": self.message,
        }


def format_report(report: RestoreReport, *, sample_size: int = 5) -> str:
    """Render a report for console output."""

    clients = report.clients
    addresses = report.addresses
    bookings = report.bookings
    matched_by = ", ".join(f"{channel}={count}" for channel, count in bookings.matched_by.items())
    lines = [
        "=" * 60,
        "RESTORATION COMPLETE",
        "=" * 60,
        f"  clients_target     : {clients.target}",
        f"  clients_restored   : {clients.restored}",
        f"  clients_skipped    : {clients.skipped}",
        f"  addresses_created  : {addresses.restored}",
        f"  addresses_reused   : {addresses.reused}",
        f"  address_placeholder: {addresses.placeholders}",
        f"  bookings_matched   : {bookings.matched} ({matched_by})",
        f"  bookings_restored  : {bookings.restored}",
        f"  bookings_skipped   : {bookings.skipped}",
        f"  bad_dates_skipped  : {bookings.unparseable_dates}",
        f"  status_defaulted   : {bookings.defaulted_status}",
    ]
    if report.message:
        lines.append(f"  note               : {report.message}")

    sections = (
        ("Client errors", clients.errors),
        ("Address errors", addresses.errors),
        ("Booking errors", bookings.errors),
        ("Bookings skipped inside the dedup window (review for reschedules)", bookings.window_conflicts),
    )
    for title, messages in sections:
        if not messages.total:
            continue
        lines.append("")
        lines.append(f"{title} ({messages.total}):")
        lines.extend(f"  - {message}" for message in messages.items[:sample_size])
        hidden = messages.total - min(len(messages.items), sample_size)
        if hidden > 0:
            lines.append(f"  ... {hidden} more")
    return "\n".join(lines)
