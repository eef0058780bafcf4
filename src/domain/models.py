"""
Domain models - Typed records for trips, clients and registrations.

Storage adapters decode rows into these dataclasses at the boundary,
so the rest of the code never looks columns up by name.

Registration and payment dates are stored as 8-digit YYYYMMDD integers.
The integers are opaque to the rest of the code; encode_date produces them
and adapters store and return them unchanged.
"""

from dataclasses import dataclass, field
from datetime import date, datetime


def encode_date(value: date) -> int:
    """Encode a date as a YYYYMMDD integer (2024-03-07 -> 20240307)."""
    return value.year * 10000 + value.month * 100 + value.day


@dataclass(frozen=True)
class Trip:
    """A bookable trip with its destination countries."""

    id: int
    name: str
    description: str
    date_from: datetime
    date_to: datetime
    max_people: int
    countries: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NewClient:
    """Validated client data that has not been assigned an id yet."""

    first_name: str
    last_name: str
    email: str
    pesel: str
    telephone: str | None = None


@dataclass(frozen=True)
class Client:
    id: int
    first_name: str
    last_name: str
    email: str
    pesel: str
    telephone: str | None = None


@dataclass(frozen=True)
class ClientTrip:
    """A trip as seen by one registered client."""

    trip_id: int
    name: str
    description: str
    date_from: datetime
    date_to: datetime
    max_people: int
    registered_at: int
    payment_date: int | None = None
