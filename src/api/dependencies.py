"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request

from src.adapters.repository.memory import InMemoryTravelRepository
from src.adapters.repository.postgres import PostgresTravelRepository
from src.domain.catalog import TripCatalogService
from src.domain.clients import ClientRegistry
from src.domain.enrollment import EnrollmentService


def get_repository(request: Request) -> PostgresTravelRepository | InMemoryTravelRepository:
    """
    Get the storage repository from app state.

    The repository is created during app lifespan startup and stored in
    app.state, so every service receives the same storage handle.
    """
    return request.app.state.repository


def get_trip_catalog(request: Request) -> TripCatalogService:
    """Create trip catalog service with injected repository."""
    return TripCatalogService(repository=get_repository(request))


def get_client_registry(request: Request) -> ClientRegistry:
    """Create client registry with injected repository."""
    return ClientRegistry(repository=get_repository(request))


def get_enrollment_service(request: Request) -> EnrollmentService:
    """Create enrollment service with injected repository."""
    return EnrollmentService(repository=get_repository(request))
