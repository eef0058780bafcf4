"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from enum import Enum
from typing import Protocol

from .models import ClientTrip, NewClient, Trip


class RegisterOutcome(Enum):
    """
    Result of an atomic registration attempt.

    Used by add_registration() to indicate success or which
    precondition failed. Preconditions are checked in declaration order.
    """

    SUCCESS = "success"
    CLIENT_NOT_FOUND = "client_not_found"
    TRIP_NOT_FOUND = "trip_not_found"
    ALREADY_REGISTERED = "already_registered"
    TRIP_FULL = "trip_full"


class TripCatalogRepository(Protocol):
    """Port interface for reading trips."""

    def list_trips(self) -> list[Trip]:
        """
        Load every trip with its country names.

        Trips without countries are included with an empty list.
        """
        ...

    def client_exists(self, client_id: int) -> bool:
        ...

    def list_client_trips(self, client_id: int) -> list[ClientTrip]:
        """Load the trips a client is registered to, ordered by trip id."""
        ...


class ClientRepository(Protocol):
    """Port interface for client persistence."""

    def add_client(self, client: NewClient) -> int:
        """
        Persist a new client.

        Args:
            client: Validated client data

        Returns:
            Newly assigned client id
        """
        ...


class EnrollmentRepository(Protocol):
    """Port interface for registration persistence."""

    def add_registration(
        self, client_id: int, trip_id: int, registered_at: int
    ) -> RegisterOutcome:
        """
        Atomically check preconditions and insert a registration.

        Checks, in order (first failure wins):
        1. Client exists
        2. Trip exists
        3. No registration exists for (client_id, trip_id)
        4. Current registration count < trip max_people

        Check 3 runs before check 4, so a registered client retrying on
        a full trip gets ALREADY_REGISTERED, not TRIP_FULL.

        Checks 3 and 4 and the insert must be atomic with respect to
        every other add_registration call for the same trip, while
        calls for different trips must not block each other.

        Args:
            client_id: Client to register
            trip_id: Trip to register for
            registered_at: Registration date as YYYYMMDD integer

        Returns:
            RegisterOutcome indicating success or the failed check
        """
        ...

    def remove_registration(self, client_id: int, trip_id: int) -> bool:
        """
        Atomically delete a registration.

        Returns:
            True if a registration was deleted, False if none existed
        """
        ...
