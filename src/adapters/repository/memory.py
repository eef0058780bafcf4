"""
In-memory repository adapter - Implements the domain repository protocols.

Keeps trips, clients and registrations in process memory for local
demos and tests. Not durable and not shared between processes.

Each trip gets its own threading.Lock, held across the duplicate check,
the capacity check and the insert. Registrations for different trips
take different locks and never wait on each other. Lock acquisition is
bounded by a timeout and reported as StorageUnavailable on expiry.

Readers never take a trip lock. They copy registrations under the
short-lived tables lock, which writers also hold while mutating.
"""

import itertools
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from src.domain.exceptions import StorageUnavailable
from src.domain.models import Client, ClientTrip, NewClient, Trip
from src.domain.ports import RegisterOutcome

logger = logging.getLogger(__name__)


class InMemoryTravelRepository:
    """
    Implements TripCatalogRepository, ClientRepository and
    EnrollmentRepository protocols with dictionaries.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, lock_timeout_seconds: float = 5.0) -> None:
        self._lock_timeout = lock_timeout_seconds
        # Guards the tables and the lock registry, held briefly
        self._tables_lock = threading.Lock()
        self._trips: dict[int, Trip] = {}
        self._clients: dict[int, Client] = {}
        self._client_ids = itertools.count(1)
        # trip_id -> client_id -> (registered_at, payment_date)
        self._registrations: dict[int, dict[int, tuple[int, int | None]]] = {}
        self._trip_locks: dict[int, threading.Lock] = {}

    def add_trip(self, trip: Trip) -> None:
        """Seed a trip (trips are provisioned outside the API)."""
        with self._tables_lock:
            self._trips[trip.id] = replace(trip, countries=list(trip.countries))
            self._registrations.setdefault(trip.id, {})
            self._trip_locks.setdefault(trip.id, threading.Lock())

    @contextmanager
    def _locked_trip(self, trip_id: int) -> Iterator[dict[int, tuple[int, int | None]] | None]:
        """Hold the trip's lock and yield its registrations, or None if unknown."""
        with self._tables_lock:
            lock = self._trip_locks.get(trip_id)
        if lock is None:
            yield None
            return
        if not lock.acquire(timeout=self._lock_timeout):
            logger.error("Timed out waiting for lock on trip %s", trip_id)
            raise StorageUnavailable("Storage unavailable")
        try:
            yield self._registrations[trip_id]
        finally:
            lock.release()

    def list_trips(self) -> list[Trip]:
        with self._tables_lock:
            trips = sorted(self._trips.values(), key=lambda t: t.id)
        return [replace(t, countries=list(t.countries)) for t in trips]

    def client_exists(self, client_id: int) -> bool:
        with self._tables_lock:
            return client_id in self._clients

    def list_client_trips(self, client_id: int) -> list[ClientTrip]:
        with self._tables_lock:
            entries = [
                (trip, self._registrations[trip.id][client_id])
                for trip in sorted(self._trips.values(), key=lambda t: t.id)
                if client_id in self._registrations[trip.id]
            ]

        return [
            ClientTrip(
                trip_id=trip.id,
                name=trip.name,
                description=trip.description,
                date_from=trip.date_from,
                date_to=trip.date_to,
                max_people=trip.max_people,
                registered_at=registered_at,
                payment_date=payment_date,
            )
            for trip, (registered_at, payment_date) in entries
        ]

    def add_client(self, client: NewClient) -> int:
        with self._tables_lock:
            client_id = next(self._client_ids)
            self._clients[client_id] = Client(
                id=client_id,
                first_name=client.first_name,
                last_name=client.last_name,
                email=client.email,
                pesel=client.pesel,
                telephone=client.telephone,
            )
        return client_id

    def add_registration(
        self, client_id: int, trip_id: int, registered_at: int
    ) -> RegisterOutcome:
        """Check preconditions and insert under the trip's lock."""
        if not self.client_exists(client_id):
            return RegisterOutcome.CLIENT_NOT_FOUND

        with self._locked_trip(trip_id) as registrations:
            if registrations is None:
                return RegisterOutcome.TRIP_NOT_FOUND
            if client_id in registrations:
                return RegisterOutcome.ALREADY_REGISTERED
            if len(registrations) >= self._trips[trip_id].max_people:
                return RegisterOutcome.TRIP_FULL
            with self._tables_lock:
                registrations[client_id] = (registered_at, None)
            return RegisterOutcome.SUCCESS

    def remove_registration(self, client_id: int, trip_id: int) -> bool:
        with self._locked_trip(trip_id) as registrations:
            if registrations is None or client_id not in registrations:
                return False
            with self._tables_lock:
                del registrations[client_id]
            return True
