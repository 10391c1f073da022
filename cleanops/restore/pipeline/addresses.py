"""
Cross-file address lookup.

Booking rows frequently omit the service address; the customers export carries
it keyed only by phone and email. When nothing is found the restore still
proceeds with placeholder values that staff can correct later.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from ..targets import TargetIdentity
from .normalize import normalize_email, normalize_phone
from .rows import BookingExportRow, CustomerExportRow

ADDRESS_PLACEHOLDER = "Address needed"
CITY_PLACEHOLDER = "City needed"

AddressSource = Literal["booking", "customers", "placeholder"]


@dataclass(frozen=True)
class ResolvedAddress:
    street: str
    city: str
    state: str
    zip: str
    source: AddressSource


@dataclass
class AddressBook:
    """Customer addresses keyed by ``phone:<digits>`` and ``email:<address>``."""

    entries: dict[str, ResolvedAddress]

    @classmethod
    def from_customer_rows(cls, rows: Iterable[CustomerExportRow]) -> "AddressBook":
        entries: dict[str, ResolvedAddress] = {}
        for row in rows:
            if not row.street or not row.city:
                continue
            address = ResolvedAddress(
                street=row.street,
                city=row.city,
                state=row.state,
                zip=row.zip,
                source="customers",
            )
            phone = normalize_phone(row.phone)
            email = normalize_email(row.email)
            if phone:
                entries[f"phone:{phone}"] = address
            if email:
                entries[f"email:{email}"] = address
        return cls(entries=entries)

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, *, phone: str = "", email: str = "") -> ResolvedAddress | None:
        if phone and f"phone:{phone}" in self.entries:
            return self.entries[f"phone:{phone}"]
        if email and f"email:{email}" in self.entries:
            return self.entries[f"email:{email}"]
        return None


def resolve_booking_address(
    row: BookingExportRow,
    target: TargetIdentity,
    address_book: AddressBook,
) -> ResolvedAddress:
    """Pick the best available address for a matched booking row."""

    if row.street and row.city:
        return ResolvedAddress(street=row.street, city=row.city, state=row.state, zip=row.zip, source="booking")

    found = address_book.lookup(phone=target.normalized_phone, email=target.normalized_email)
    if found is not None:
        return found

    return ResolvedAddress(
        street=row.street or ADDRESS_PLACEHOLDER,
        city=row.city or CITY_PLACEHOLDER,
        state=row.state,
        zip=row.zip,
        source="placeholder",
    )
