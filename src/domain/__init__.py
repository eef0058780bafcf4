"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for trip catalog reads,
client registration and capacity-limited trip enrollment. It defines
its own port interfaces for infrastructure abstraction, ensuring true
hexagonal architecture decoupling.
"""

from .catalog import TripCatalogService
from .clients import ClientRegistry
from .enrollment import EnrollmentService
from .exceptions import (
    AlreadyRegistered,
    CapacityExceeded,
    ClientNotFound,
    NotFound,
    RegistrationNotFound,
    StorageUnavailable,
    TravelAgencyError,
    TripNotFound,
    ValidationError,
)
from .models import Client, ClientTrip, NewClient, Trip, encode_date
from .ports import (
    ClientRepository,
    EnrollmentRepository,
    RegisterOutcome,
    TripCatalogRepository,
)

__all__ = [
    "AlreadyRegistered",
    "CapacityExceeded",
    "Client",
    "ClientNotFound",
    "ClientRegistry",
    "ClientRepository",
    "ClientTrip",
    "EnrollmentRepository",
    "EnrollmentService",
    "NewClient",
    "NotFound",
    "RegisterOutcome",
    "RegistrationNotFound",
    "StorageUnavailable",
    "TravelAgencyError",
    "Trip",
    "TripCatalogRepository",
    "TripCatalogService",
    "TripNotFound",
    "ValidationError",
    "encode_date",
]
