"""
Trip catalog domain service - Read-only trip queries.
"""

from dataclasses import dataclass

from .exceptions import ClientNotFound
from .models import ClientTrip, Trip
from .ports import TripCatalogRepository


@dataclass
class TripCatalogService:
    """Reads trips, globally or for a single client."""

    repository: TripCatalogRepository

    def list_trips(self) -> list[Trip]:
        return self.repository.list_trips()

    def list_trips_for_client(self, client_id: int) -> list[ClientTrip]:
        """
        List the trips a client is registered to.

        Args:
            client_id: Client id

        Returns:
            Trips with registration and payment dates

        Raises:
            ClientNotFound: If the client does not exist
        """
        if not self.repository.client_exists(client_id):
            raise ClientNotFound(client_id)
        return self.repository.list_client_trips(client_id)
