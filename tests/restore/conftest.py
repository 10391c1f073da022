from __future__ import annotations

from itertools import count

import pytest

from cleanops.restore.errors import RestoreConnectionError, RestoreStoreError
from cleanops.restore.pipeline import RestoreContext, RestoreEngine
from cleanops.restore.targets import parse_target_identities

BOOKING_HEADERS = (
    "Full name",
    "First name",
    "Last name",
    "Phone",
    "Email",
    "Booking start date time",
    "Estimated job length (HH:MM)",
    "Final amount (USD)",
    "Booking status",
    "Frequency",
    "Service",
    "Booking note",
    "Private customer note",
    "Address",
    "City",
    "State",
    "Zip/Postal code",
    "Amount paid by customer (USD)",
    "Payment method",
)

CUSTOMER_HEADERS = ("Phone Number", "Email Address", "Address", "City", "State", "Zip/Postal Code")


def _quote(value: str) -> str:
    return f'"{value}"' if "," in value else value


def render_csv(headers, rows) -> str:
    """Render dict rows as export text using the given header order."""
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_quote(str(row.get(header, ""))) for header in headers))
    return "\r\n".join(lines) + "\r\n"


class InMemoryRestoreStore:
    """Dict-backed store with switchable failures."""

    def __init__(self):
        self.clients = {}
        self.addresses = {}
        self.bookings = {}
        self.connected = True
        self.failing_clients: set[str] = set()
        self.failing_addresses: set[str] = set()
        self.failing_bookings: set[str] = set()
        self._ids = count(1)

    def ping(self):
        if not self.connected:
            raise RestoreConnectionError("Failed to connect to database: connection refused")

    def client_exists(self, client_id):
        return client_id in self.clients

    def find_client_by_contact(self, company_id, *, phone, email):
        for client in self.clients.values():
            if client.company_id != company_id:
                continue
            if phone and client.phone == phone:
                return client.id
            if email and client.email and client.email.lower() == email.lower():
                return client.id
        return None

    def create_client(self, payload):
        if payload.id in self.failing_clients:
            raise RestoreStoreError("create client", "constraint violation")
        self.clients[payload.id] = payload
        return payload.id

    def find_address_id(self, client_id):
        for address_id, address in self.addresses.items():
            if address.client_id == client_id:
                return address_id
        return None

    def create_address(self, payload):
        if payload.client_id in self.failing_addresses:
            raise RestoreStoreError("create address", "constraint violation")
        address_id = f"address-{next(self._ids)}"
        self.addresses[address_id] = payload
        return address_id

    def find_booking_in_window(self, company_id, client_id, start, end):
        hits = sorted(
            booking.scheduled_date
            for booking in self.bookings.values()
            if booking.company_id == company_id
            and booking.client_id == client_id
            and start <= booking.scheduled_date <= end
        )
        return hits[0] if hits else None

    def create_booking(self, payload):
        if payload.client_id in self.failing_bookings:
            raise RestoreStoreError("create booking", "constraint violation")
        booking_id = f"booking-{next(self._ids)}"
        self.bookings[booking_id] = payload
        return booking_id

    def count_existing_clients(self, client_ids):
        return sum(1 for client_id in client_ids if client_id in self.clients)

    def count_bookings_for_clients(self, company_id, client_ids):
        wanted = set(client_ids)
        return sum(
            1
            for booking in self.bookings.values()
            if booking.company_id == company_id and booking.client_id in wanted
        )

    def bookings_for(self, client_id):
        return sorted(
            (booking for booking in self.bookings.values() if booking.client_id == client_id),
            key=lambda booking: booking.scheduled_date,
        )


@pytest.fixture
def targets(target_payload):
    return parse_target_identities(target_payload)


@pytest.fixture
def memory_store():
    return InMemoryRestoreStore()


@pytest.fixture
def restore_context():
    return RestoreContext(company_id="company-1", user_id="user-1")


@pytest.fixture
def make_engine(memory_store, restore_context, targets):
    def _factory(store=None, *, context=None, identities=None, **kwargs):
        return RestoreEngine(
            store if store is not None else memory_store,
            context or restore_context,
            targets if identities is None else identities,
            **kwargs,
        )

    return _factory


@pytest.fixture
def booking_row():
    """Factory for a bookings-export row dict with sensible defaults."""

    def _row(**overrides):
        row = {
            "Full name": "",
            "Phone": "",
            "Email": "",
            "Booking start date time": "2025-03-04T10:00:00",
            "Estimated job length (HH:MM)": "2:00",
            "Final amount (USD)": "$150.00",
            "Booking status": "Upcoming",
            "Frequency": "One time",
        }
        row.update(overrides)
        return row

    return _row


@pytest.fixture
def export_files(tmp_path):
    """Write bookings/customers exports to disk and return their paths."""

    def _write(booking_dicts, customer_dicts=None):
        bookings_path = tmp_path / "bookings.csv"
        bookings_path.write_text("\ufeff" + render_csv(BOOKING_HEADERS, booking_dicts), encoding="utf-8")
        customers_path = tmp_path / "customers.csv"
        if customer_dicts is not None:
            customers_path.write_text(render_csv(CUSTOMER_HEADERS, customer_dicts), encoding="utf-8")
        return bookings_path, customers_path

    return _write


@pytest.fixture
def render_bookings():
    def _render(rows):
        return render_csv(BOOKING_HEADERS, rows)

    return _render


@pytest.fixture
def render_customers():
    def _render(rows):
        return render_csv(CUSTOMER_HEADERS, rows)

    return _render
