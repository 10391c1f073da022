"""
Field mappers translating free-text export values into canonical booking values.

Keyword rules are evaluated in order and the first containment match wins;
matching is case-insensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from cleanops.models.enums import BookingStatus, RecurrenceFrequency, ServiceType

from .normalize import unwrap_excel_text

DEFAULT_DURATION_MINUTES = 120

_STATUS_RULES: tuple[tuple[tuple[str, ...], BookingStatus], ...] = (
    (("cancel",), BookingStatus.CANCELLED),
    (("complete", "done"), BookingStatus.COMPLETED),
    (("no show", "no_show"), BookingStatus.NO_SHOW),
    (("confirm",), BookingStatus.CONFIRMED),
    (("pending",), BookingStatus.PENDING),
)

_SERVICE_RULES: tuple[tuple[tuple[str, ...], ServiceType], ...] = (
    (("deep",), ServiceType.DEEP_CLEAN),
    (("move",), ServiceType.MOVE_IN_OUT),
    (("office", "commercial"), ServiceType.COMMERCIAL),
)

_CURRENCY_JUNK = re.compile(r"[^0-9.]")
_LEADING_FLOAT = re.compile(r"^\d*\.?\d+|^\d+\.")

_ISO_FRACTION = re.compile(r"(?<=:\d{2})\.(\d+)")

_US_DATE_FORMATS = (
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)


@dataclass(frozen=True)
class Recurrence:
    is_recurring: bool
    frequency: RecurrenceFrequency


def _clean(value: object | None) -> str:
    return unwrap_excel_text(value).strip()


def parse_iso_datetime(text: str) -> datetime:
    """
    ``datetime.fromisoformat`` accepting a trailing ``Z`` and fractions of any length.

    Fractional seconds are padded or cut to microseconds, so ``12.06`` reads
    as 60000 microseconds on every supported interpreter.
    """

    token = text.replace("Z", "+00:00")
    token = _ISO_FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), token, count=1)
    return datetime.fromisoformat(token)


def map_status_keyword(value: object | None) -> BookingStatus | None:
    """Return the status named by ``value`` or None when no keyword matches."""

    text = _clean(value).lower()
    for keywords, status in _STATUS_RULES:
        if any(keyword in text for keyword in keywords):
            return status
    return None


def map_booking_status(value: object | None, *, default: BookingStatus) -> BookingStatus:
    """
    Map an export status to a booking status.

    ``default`` is required so every caller states what an unrecognised status
    becomes.
    """

    status = map_status_keyword(value)
    return default if status is None else status


def map_service_type(value: object | None) -> ServiceType:
    text = _clean(value).lower()
    for keywords, service_type in _SERVICE_RULES:
        if any(keyword in text for keyword in keywords):
            return service_type
    return ServiceType.STANDARD


def map_recurrence(value: object | None) -> Recurrence:
    text = _clean(value).lower()
    if "weekly" in text and "bi" not in text:
        return Recurrence(True, RecurrenceFrequency.WEEKLY)
    if "biweekly" in text or "bi-weekly" in text:
        return Recurrence(True, RecurrenceFrequency.BIWEEKLY)
    if "monthly" in text:
        return Recurrence(True, RecurrenceFrequency.MONTHLY)
    return Recurrence(False, RecurrenceFrequency.NONE)


def parse_duration(value: object | None) -> int:
    """Convert ``H:MM`` into minutes; anything unparseable becomes 120."""

    text = _clean(value)
    if not text:
        return DEFAULT_DURATION_MINUTES
    parts = text.split(":")
    if len(parts) != 2:
        return DEFAULT_DURATION_MINUTES
    hours_text, minutes_text = (part.strip() for part in parts)
    if not hours_text.isdecimal() or not minutes_text.isdecimal():
        return DEFAULT_DURATION_MINUTES
    try:
        return int(hours_text) * 60 + int(minutes_text)
    except ValueError:
        return DEFAULT_DURATION_MINUTES


def parse_currency(value: object | None) -> float:
    """Strip everything but digits and dots, then parse; failures become 0."""

    digits = _CURRENCY_JUNK.sub("", _clean(value))
    match = _LEADING_FLOAT.match(digits)
    if match is None:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def parse_scheduled_date(value: object | None) -> datetime | None:
    """
    Parse an export timestamp into naive UTC.

    Accepts ISO-8601 (``2025-01-02T11:00:00-08:00``) and US ``MM/DD/YYYY``
    dates with an optional time. Naive inputs are taken as UTC.
    """

    text = _clean(value)
    if not text:
        return None

    parsed: datetime | None = None
    try:
        parsed = parse_iso_datetime(text)
    except ValueError:
        for date_format in _US_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, date_format)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            return None
    return parsed
