"""Repository adapters - Database and in-memory implementations."""

from .memory import InMemoryTravelRepository
from .postgres import PostgresTravelRepository, create_pool, run_migrations

__all__ = [
    "InMemoryTravelRepository",
    "PostgresTravelRepository",
    "create_pool",
    "run_migrations",
]
