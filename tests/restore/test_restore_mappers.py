from datetime import datetime

import pytest

from cleanops.models.enums import BookingStatus, RecurrenceFrequency, ServiceType
from cleanops.restore.pipeline import (
    map_booking_status,
    map_recurrence,
    map_service_type,
    map_status_keyword,
    parse_currency,
    parse_duration,
    parse_iso_datetime,
    parse_scheduled_date,
)


@pytest.mark.parametrize(
    "raw, minutes",
    [
        ("1:30", 90),
        ("2:00", 120),
        ("0:45", 45),
        ("", 120),
        (None, 120),
        ("ninety", 120),
        ("1:30:00", 120),
        ("1:xx", 120),
        ("\u00b2:00", 120),
        ("1:\u00b3\u2070", 120),
    ],
)
def test_parse_duration(raw, minutes):
    assert parse_duration(raw) == minutes


@pytest.mark.parametrize(
    "raw, amount",
    [
        ("$1,234.56", 1234.56),
        ("N/A", 0.0),
        ("", 0.0),
        ('="$99.50"', 99.5),
        ("150", 150.0),
    ],
)
def test_parse_currency(raw, amount):
    assert parse_currency(raw) == pytest.approx(amount)


@pytest.mark.parametrize(
    "raw, status",
    [
        ("Completed - paid in full", BookingStatus.COMPLETED),
        ("done", BookingStatus.COMPLETED),
        ("Cancelled by customer", BookingStatus.CANCELLED),
        ("No Show", BookingStatus.NO_SHOW),
        ("no_show", BookingStatus.NO_SHOW),
        ("Confirmed", BookingStatus.CONFIRMED),
        ("Pending approval", BookingStatus.PENDING),
    ],
)
def test_status_keywords(raw, status):
    assert map_status_keyword(raw) is status


def test_unrecognised_status_uses_explicit_default():
    assert map_status_keyword("Upcoming") is None
    assert map_booking_status("Upcoming", default=BookingStatus.SCHEDULED) is BookingStatus.SCHEDULED
    assert map_booking_status("", default=BookingStatus.PENDING) is BookingStatus.PENDING


@pytest.mark.parametrize(
    "raw, service_type",
    [
        ("Deep Clean", ServiceType.DEEP_CLEAN),
        ("Move-out clean", ServiceType.MOVE_IN_OUT),
        ("Office", ServiceType.COMMERCIAL),
        ("Commercial space", ServiceType.COMMERCIAL),
        ("Bi-Weekly", ServiceType.STANDARD),
        (None, ServiceType.STANDARD),
    ],
)
def test_service_type(raw, service_type):
    assert map_service_type(raw) is service_type


@pytest.mark.parametrize(
    "raw, recurring, frequency",
    [
        ("Weekly", True, RecurrenceFrequency.WEEKLY),
        ("Bi-Weekly", True, RecurrenceFrequency.BIWEEKLY),
        ("biweekly", True, RecurrenceFrequency.BIWEEKLY),
        ("Monthly", True, RecurrenceFrequency.MONTHLY),
        ("One time", False, RecurrenceFrequency.NONE),
        ("", False, RecurrenceFrequency.NONE),
    ],
)
def test_recurrence(raw, recurring, frequency):
    recurrence = map_recurrence(raw)

    assert recurrence.is_recurring is recurring
    assert recurrence.frequency is frequency


def test_scheduled_date_is_normalized_to_naive_utc():
    assert parse_scheduled_date("2025-01-02T11:00:00-08:00") == datetime(2025, 1, 2, 19, 0)
    assert parse_scheduled_date("2025-01-02T11:00:00Z") == datetime(2025, 1, 2, 11, 0)
    assert parse_scheduled_date("2025-01-02 11:00") == datetime(2025, 1, 2, 11, 0)


def test_scheduled_date_accepts_us_formats():
    assert parse_scheduled_date("01/15/2025 09:30 AM") == datetime(2025, 1, 15, 9, 30)
    assert parse_scheduled_date("01/15/2025") == datetime(2025, 1, 15)


def test_unparseable_dates_return_none():
    assert parse_scheduled_date("next tuesday") is None
    assert parse_scheduled_date("") is None
    assert parse_scheduled_date(None) is None


def test_scheduled_date_outside_datetime_range_returns_none():
    assert parse_scheduled_date("0001-01-01T00:30:00+05:00") is None
    assert parse_scheduled_date("9999-12-31T23:00:00") == datetime(9999, 12, 31, 23, 0)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2026-01-13 02:53:12.06", datetime(2026, 1, 13, 2, 53, 12, 60000)),
        ("2026-01-07 02:14:20.5", datetime(2026, 1, 7, 2, 14, 20, 500000)),
        ("2026-01-07T02:14:20.1234567Z", datetime(2026, 1, 7, 2, 14, 20, 123456)),
    ],
)
def test_scheduled_date_accepts_any_fraction_length(raw, expected):
    assert parse_scheduled_date(raw) == expected
    assert parse_iso_datetime(raw).replace(tzinfo=None) == expected
