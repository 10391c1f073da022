"""
Typed views over tokenized export rows.

The two exports use different header spellings for the same facts (for example
``Phone`` vs ``Phone Number``); the accessors here are the only place those
header names appear.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from .normalize import compose_full_name, unwrap_excel_text


@dataclass(frozen=True)
class SourceRow:
    """One tokenized CSV record; ``line_number`` counts the header as line 1 and skips blank lines."""

    line_number: int
    values: Mapping[str, str]

    def get(self, *headers: str) -> str:
        """Return the first non-empty value among ``headers``, unwrapped and trimmed."""

        for header in headers:
            value = unwrap_excel_text(self.values.get(header, "")).strip()
            if value:
                return value
        return ""


class BookingExportRow(SourceRow):
    """Row from the bookings export."""

    @property
    def phone(self) -> str:
        return self.get("Phone")

    @property
    def email(self) -> str:
        return self.get("Email")

    @property
    def full_name(self) -> str:
        return compose_full_name(self.get("Full name"), self.get("First name"), self.get("Last name"))

    @property
    def scheduled_start(self) -> str:
        return self.get("Booking start date time")

    @property
    def duration(self) -> str:
        return self.get("Estimated job length (HH:MM)")

    @property
    def price(self) -> str:
        return self.get("Final amount (USD)", "Service total (USD)")

    @property
    def amount_paid(self) -> str:
        return self.get("Amount paid by customer (USD)")

    @property
    def payment_method(self) -> str:
        return self.get("Payment method")

    @property
    def status(self) -> str:
        return self.get("Booking status")

    @property
    def frequency(self) -> str:
        return self.get("Frequency")

    @property
    def service(self) -> str:
        return self.get("Service")

    @property
    def service_description(self) -> str:
        """Text the service type is derived from: frequency, else the service column."""

        return self.get("Frequency", "Service")

    @property
    def notes(self) -> str:
        return self.get("Booking note")

    @property
    def internal_notes(self) -> str:
        return self.get("Private customer note", "Provider note")

    @property
    def street(self) -> str:
        return self.get("Address")

    @property
    def city(self) -> str:
        return self.get("City")

    @property
    def state(self) -> str:
        return self.get("State")

    @property
    def zip(self) -> str:
        return self.get("Zip/Postal code", "Zip/Postal Code")


class CustomerExportRow(SourceRow):
    """Row from the customers export."""

    @property
    def phone(self) -> str:
        return self.get("Phone Number", "Phone")

    @property
    def email(self) -> str:
        return self.get("Email Address", "Email")

    @property
    def street(self) -> str:
        return self.get("Address")

    @property
    def city(self) -> str:
        return self.get("City")

    @property
    def state(self) -> str:
        return self.get("State")

    @property
    def zip(self) -> str:
        return self.get("Zip/Postal Code", "Zip/Postal code")


def booking_rows(records: Iterable[Mapping[str, str]]) -> list[BookingExportRow]:
    # Line 1 is the header.
    return [BookingExportRow(line_number=index, values=record) for index, record in enumerate(records, start=2)]


def customer_rows(records: Iterable[Mapping[str, str]]) -> list[CustomerExportRow]:
    return [CustomerExportRow(line_number=index, values=record) for index, record in enumerate(records, start=2)]
