"""
Storage port used by the restore engine, plus the SQLAlchemy adapter.

The engine never touches the session directly; every read and write goes
through :class:`RestoreStore` so runs can be exercised against an in-memory
store in tests. Each write is committed immediately because later rows depend
on earlier rows having been persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol, Sequence, TypeVar

from sqlalchemy import func, or_, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cleanops.models import Address, Booking, Client
from cleanops.models.enums import BookingStatus, RecurrenceFrequency, ServiceType

from ..errors import RestoreConnectionError, RestoreStoreError

T = TypeVar("T")


@dataclass(frozen=True)
class ClientPayload:
    id: str
    company_id: str
    user_id: str
    name: str
    email: str | None
    phone: str | None
    created_at: datetime


@dataclass(frozen=True)
class AddressPayload:
    client_id: str
    street: str
    city: str
    state: str
    zip: str
    label: str = "Home"


@dataclass(frozen=True)
class BookingPayload:
    company_id: str
    user_id: str
    client_id: str
    address_id: str
    scheduled_date: datetime
    duration: int
    price: float
    status: BookingStatus
    service_type: ServiceType
    is_recurring: bool
    recurrence_frequency: RecurrenceFrequency
    notes: str | None
    internal_notes: str | None
    is_paid: bool
    payment_method: str | None


class RestoreStore(Protocol):
    """Datastore operations the restore engine relies on."""

    def ping(self) -> None: ...

    def client_exists(self, client_id: str) -> bool: ...

    def find_client_by_contact(self, company_id: str, *, phone: str | None, email: str | None) -> str | None: ...

    def create_client(self, payload: ClientPayload) -> str: ...

    def find_address_id(self, client_id: str) -> str | None: ...

    def create_address(self, payload: AddressPayload) -> str: ...

    def find_booking_in_window(
        self, company_id: str, client_id: str, start: datetime, end: datetime
    ) -> datetime | None: ...

    def create_booking(self, payload: BookingPayload) -> str: ...

    def count_existing_clients(self, client_ids: Sequence[str]) -> int: ...

    def count_bookings_for_clients(self, company_id: str, client_ids: Sequence[str]) -> int: ...


class SQLAlchemyRestoreStore:
    """:class:`RestoreStore` backed by a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _guard(self, operation: str, action: Callable[[], T]) -> T:
        try:
            return action()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RestoreStoreError(operation, str(getattr(exc, "orig", None) or exc)) from exc

    def _commit(self, operation: str, instance) -> str:
        def _write() -> str:
            self.session.add(instance)
            self.session.commit()
            return instance.id

        return self._guard(operation, _write)

    def ping(self) -> None:
        try:
            self.session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RestoreConnectionError(f"Failed to connect to database: {exc}") from exc

    def client_exists(self, client_id: str) -> bool:
        return self._guard("find client", lambda: self.session.get(Client, client_id) is not None)

    def find_client_by_contact(self, company_id: str, *, phone: str | None, email: str | None) -> str | None:
        conditions = []
        if phone:
            conditions.append(Client.phone == phone)
        if email:
            conditions.append(func.lower(Client.email) == email.lower())
        if not conditions:
            return None

        def _query() -> str | None:
            match = (
                self.session.query(Client.id)
                .filter(Client.company_id == company_id, or_(*conditions))
                .order_by(Client.created_at, Client.id)
                .first()
            )
            return match[0] if match else None

        return self._guard("find client by contact", _query)

    def create_client(self, payload: ClientPayload) -> str:
        client = Client(
            id=payload.id,
            company_id=payload.company_id,
            user_id=payload.user_id,
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            created_at=payload.created_at,
            updated_at=payload.created_at,
        )
        return self._commit("create client", client)

    def find_address_id(self, client_id: str) -> str | None:
        def _query() -> str | None:
            match = (
                self.session.query(Address.id)
                .filter(Address.client_id == client_id)
                .order_by(Address.created_at, Address.id)
                .first()
            )
            return match[0] if match else None

        return self._guard("find address", _query)

    def create_address(self, payload: AddressPayload) -> str:
        address = Address(
            client_id=payload.client_id,
            label=payload.label,
            street=payload.street,
            city=payload.city,
            state=payload.state,
            zip=payload.zip,
        )
        return self._commit("create address", address)

    def find_booking_in_window(
        self, company_id: str, client_id: str, start: datetime, end: datetime
    ) -> datetime | None:
        def _query() -> datetime | None:
            match = (
                self.session.query(Booking.scheduled_date)
                .filter(
                    Booking.company_id == company_id,
                    Booking.client_id == client_id,
                    Booking.scheduled_date >= start,
                    Booking.scheduled_date <= end,
                )
                .order_by(Booking.scheduled_date)
                .first()
            )
            return match[0] if match else None

        return self._guard("find booking", _query)

    def create_booking(self, payload: BookingPayload) -> str:
        booking = Booking(
            company_id=payload.company_id,
            user_id=payload.user_id,
            client_id=payload.client_id,
            address_id=payload.address_id,
            scheduled_date=payload.scheduled_date,
            duration=payload.duration,
            price=payload.price,
            status=payload.status,
            service_type=payload.service_type,
            is_recurring=payload.is_recurring,
            recurrence_frequency=payload.recurrence_frequency,
            notes=payload.notes,
            internal_notes=payload.internal_notes,
            is_paid=payload.is_paid,
            payment_method=payload.payment_method,
        )
        return self._commit("create booking", booking)

    def count_existing_clients(self, client_ids: Sequence[str]) -> int:
        if not client_ids:
            return 0
        return self._guard(
            "count clients",
            lambda: self.session.query(Client.id).filter(Client.id.in_(list(client_ids))).count(),
        )

    def count_bookings_for_clients(self, company_id: str, client_ids: Sequence[str]) -> int:
        if not client_ids:
            return 0
        return self._guard(
            "count bookings",
            lambda: self.session.query(Booking.id)
            .filter(Booking.company_id == company_id, Booking.client_id.in_(list(client_ids)))
            .count(),
        )
