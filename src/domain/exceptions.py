"""
Domain exceptions - Semantic error types for the travel agency.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The HTTP layer maps each of them to a status code.
"""


class TravelAgencyError(Exception):
    """Base class for travel agency domain errors."""

    pass


class NotFound(TravelAgencyError):
    """A referenced entity does not exist."""

    entity = "Entity"

    def __init__(self, *ids: int) -> None:
        self.ids = ids
        super().__init__(f"{self.entity} not found: {', '.join(map(str, ids))}")


class ClientNotFound(NotFound):
    entity = "Client"


class TripNotFound(NotFound):
    entity = "Trip"


class RegistrationNotFound(NotFound):
    """No registration exists for the (client, trip) pair."""

    entity = "Registration"


class ValidationError(TravelAgencyError):
    """Required client fields are missing or blank."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class CapacityExceeded(TravelAgencyError):
    """Trip already holds max_people registrations."""

    pass


class AlreadyRegistered(TravelAgencyError):
    """Client is already registered for the trip."""

    pass


class StorageUnavailable(TravelAgencyError):
    """Storage could not be reached or an operation timed out."""

    pass
