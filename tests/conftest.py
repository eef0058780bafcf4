"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Seeded in-memory repositories
- PostgreSQL connection pool (tests skip when no database is reachable)
- Trip/client seeding helpers
"""

from collections.abc import Generator
from datetime import datetime

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.memory import InMemoryTravelRepository
from src.adapters.repository.postgres import (
    PostgresTravelRepository,
    create_pool,
    run_migrations,
)
from src.config.settings import get_settings
from src.domain.models import NewClient, Trip


def _make_trip(trip_id: int, max_people: int = 2, countries: list[str] | None = None) -> Trip:
    """Build a trip with fixed dates for tests."""
    return Trip(
        id=trip_id,
        name=f"Trip {trip_id}",
        description=f"Description {trip_id}",
        date_from=datetime(2030, 6, 1),
        date_to=datetime(2030, 6, 14),
        max_people=max_people,
        countries=countries or [],
    )


def _make_client(n: int = 1) -> NewClient:
    """Build valid client data numbered n."""
    return NewClient(
        first_name=f"First{n}",
        last_name=f"Last{n}",
        email=f"client{n}@example.com",
        pesel=f"{n:011d}",
    )


@pytest.fixture
def memory_repository() -> InMemoryTravelRepository:
    """
    In-memory repository seeded with:
    - trip 1: 2 seats, Poland + Italy
    - trip 2: 5 seats, no countries
    """
    repo = InMemoryTravelRepository(lock_timeout_seconds=2.0)
    repo.add_trip(_make_trip(1, max_people=2, countries=["Italy", "Poland"]))
    repo.add_trip(_make_trip(2, max_people=5))
    return repo


@pytest.fixture(scope="session")
def pg_pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for PostgreSQL tests, skipping if unreachable."""
    pool = create_pool(get_settings(), open=False)
    try:
        pool.open(wait=True, timeout=2.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def pg_repository(pg_pool: ConnectionPool) -> PostgresTravelRepository:
    """Create repository over clean tables for each test."""
    with pg_pool.connection() as conn:
        conn.execute(
            "TRUNCATE client_trip, country_trip, client, trip, country RESTART IDENTITY CASCADE"
        )
        conn.commit()
    return PostgresTravelRepository(pg_pool)


def _seed_trip(
    pool: ConnectionPool, max_people: int = 2, countries: list[str] | None = None
) -> int:
    """Insert a trip (and its countries) directly, returning its id."""
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(
            """INSERT INTO trip (name, description, date_from, date_to, max_people)
               VALUES (%s, %s, %s, %s, %s) RETURNING id_trip""",
            (
                "Seeded trip",
                "Seeded description",
                datetime(2030, 6, 1),
                datetime(2030, 6, 14),
                max_people,
            ),
        )
        trip_id = cursor.fetchone()[0]
        for name in countries or []:
            cursor.execute(
                "INSERT INTO country (name) VALUES (%s) RETURNING id_country", (name,)
            )
            country_id = cursor.fetchone()[0]
            cursor.execute(
                "INSERT INTO country_trip (id_country, id_trip) VALUES (%s, %s)",
                (country_id, trip_id),
            )
        conn.commit()
    return trip_id


@pytest.fixture
def trip_factory():
    """Factory fixture building Trip records."""
    return _make_trip


@pytest.fixture
def client_factory():
    """Factory fixture building NewClient records."""
    return _make_client


@pytest.fixture
def seed_trip(pg_pool: ConnectionPool, pg_repository: PostgresTravelRepository):
    """Factory fixture inserting a trip into clean PostgreSQL tables, returning its id."""

    def seed(max_people: int = 2, countries: list[str] | None = None) -> int:
        return _seed_trip(pg_pool, max_people, countries)

    return seed
