"""
Enrollment domain service - Client-to-trip registration.

Each (client, trip) pair is a two-state machine:

    NOT_REGISTERED --register()--> REGISTERED
    REGISTERED --unregister()--> NOT_REGISTERED

register() on a REGISTERED pair and unregister() on a NOT_REGISTERED
pair are rejected with an exception, never ignored.

Capacity Enforcement
====================

register() checks, in order:
1. Client exists            -> ClientNotFound
2. Trip exists              -> TripNotFound
3. Pair not registered yet  -> AlreadyRegistered
4. Count < trip max_people  -> CapacityExceeded

A client already registered for a full trip therefore gets
AlreadyRegistered, not CapacityExceeded.

The service holds no state between calls. Checks 3 and 4 and the insert
run inside the repository as one atomic unit per trip (row lock in
PostgreSQL, per-trip lock in memory), so two concurrent registrations
can never both see a free seat and both insert.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from .exceptions import (
    AlreadyRegistered,
    CapacityExceeded,
    ClientNotFound,
    RegistrationNotFound,
    TripNotFound,
)
from .models import encode_date
from .ports import EnrollmentRepository, RegisterOutcome

logger = logging.getLogger(__name__)


@dataclass
class EnrollmentService:
    """
    Domain service for trip enrollment.

    Stamps registrations with today's date and translates repository
    outcomes into domain exceptions.
    """

    repository: EnrollmentRepository
    today: Callable[[], date] = date.today

    def register(self, client_id: int, trip_id: int) -> int:
        """
        Register a client for a trip.

        Args:
            client_id: Client to register
            trip_id: Trip to register for

        Returns:
            Registration date as YYYYMMDD integer

        Raises:
            ClientNotFound: If the client does not exist
            TripNotFound: If the trip does not exist
            AlreadyRegistered: If the client is already registered
            CapacityExceeded: If the trip is full
        """
        registered_at = encode_date(self.today())
        outcome = self.repository.add_registration(client_id, trip_id, registered_at)

        if outcome == RegisterOutcome.SUCCESS:
            logger.info("Registered client %s for trip %s", client_id, trip_id)
            return registered_at
        if outcome == RegisterOutcome.CLIENT_NOT_FOUND:
            raise ClientNotFound(client_id)
        if outcome == RegisterOutcome.TRIP_NOT_FOUND:
            raise TripNotFound(trip_id)
        if outcome == RegisterOutcome.TRIP_FULL:
            logger.warning("Trip %s is full, rejected client %s", trip_id, client_id)
            raise CapacityExceeded(trip_id)

        logger.warning("Client %s already registered for trip %s", client_id, trip_id)
        raise AlreadyRegistered(client_id, trip_id)

    def unregister(self, client_id: int, trip_id: int) -> None:
        """
        Remove a client's registration for a trip.

        Raises:
            RegistrationNotFound: If no registration exists, including
                on a repeated call after a successful unregister
        """
        if not self.repository.remove_registration(client_id, trip_id):
            raise RegistrationNotFound(client_id, trip_id)
        logger.info("Unregistered client %s from trip %s", client_id, trip_id)
