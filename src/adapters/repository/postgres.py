"""
PostgreSQL repository adapter - Implements the domain repository protocols.

This module provides the PostgreSQL implementation of the domain's
repository ports using psycopg3 with raw SQL.

Concurrency Design - Per-Trip Capacity Lock:
-------------------------------------------
add_registration runs the capacity check and the insert in a single
transaction that first locks the trip row:

1. **SELECT ... FOR UPDATE on trip**: Concurrent registrations for the
   same trip queue on this row lock until the holder commits. Different
   trips lock different rows, so they never wait on each other.

2. **COUNT after the lock**: Under READ COMMITTED each statement takes a
   fresh snapshot, so the count sees every registration committed by
   previous lock holders.

3. **PRIMARY KEY (id_client, id_trip)**: Backs the duplicate check; a
   UniqueViolation on insert is reported as ALREADY_REGISTERED.

Every connection carries statement_timeout and lock_timeout, and pool
checkout is bounded, so a stuck database surfaces as StorageUnavailable
instead of a hung request.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from psycopg import Connection, OperationalError
from psycopg.errors import UniqueViolation
from psycopg.rows import class_row
from psycopg_pool import ConnectionPool, PoolTimeout

from src.config.settings import Settings
from src.domain.exceptions import StorageUnavailable
from src.domain.models import ClientTrip, NewClient, Trip
from src.domain.ports import RegisterOutcome

logger = logging.getLogger(__name__)


def create_pool(settings: Settings, open: bool = True) -> ConnectionPool:
    """
    Create a connection pool with timeouts applied to every connection.

    Args:
        settings: Application settings
        open: Open the pool immediately

    Returns:
        psycopg3 ConnectionPool
    """
    options = (
        f"-c statement_timeout={settings.statement_timeout_ms} "
        f"-c lock_timeout={settings.lock_timeout_ms}"
    )
    return ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        timeout=settings.pool_timeout_seconds,
        kwargs={"options": options},
        open=open,
    )


class PostgresTravelRepository:
    """
    Implements TripCatalogRepository, ClientRepository and
    EnrollmentRepository protocols via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        """Borrow a pooled connection, translating connectivity failures."""
        try:
            with self._pool.connection() as conn:
                yield conn
        except (OperationalError, PoolTimeout) as e:
            logger.error("Storage unavailable: %s", e)
            raise StorageUnavailable("Storage unavailable") from e

    def list_trips(self) -> list[Trip]:
        """
        Load all trips with their countries.

        LEFT JOINs keep trips without countries; FILTER drops the NULL
        country produced by the outer join, and COALESCE turns the
        resulting NULL aggregate into an empty array.
        """
        sql = """
            SELECT t.id_trip AS id, t.name, t.description, t.date_from, t.date_to,
                   t.max_people,
                   COALESCE(
                       array_agg(c.name ORDER BY c.name) FILTER (WHERE c.name IS NOT NULL),
                       '{}'
                   ) AS countries
            FROM trip t
            LEFT JOIN country_trip ct ON ct.id_trip = t.id_trip
            LEFT JOIN country c ON c.id_country = ct.id_country
            GROUP BY t.id_trip
            ORDER BY t.id_trip
        """

        with self._connection() as conn, conn.cursor(row_factory=class_row(Trip)) as cursor:
            cursor.execute(sql)
            trips = cursor.fetchall()
            conn.commit()
            return trips

    def client_exists(self, client_id: int) -> bool:
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM client WHERE id_client = %s", (client_id,))
            found = cursor.fetchone() is not None
            conn.commit()
            return found

    def list_client_trips(self, client_id: int) -> list[ClientTrip]:
        sql = """
            SELECT t.id_trip AS trip_id, t.name, t.description, t.date_from, t.date_to,
                   t.max_people, ct.registered_at, ct.payment_date
            FROM trip t
            JOIN client_trip ct ON ct.id_trip = t.id_trip
            WHERE ct.id_client = %s
            ORDER BY t.id_trip
        """

        with self._connection() as conn, conn.cursor(
            row_factory=class_row(ClientTrip)
        ) as cursor:
            cursor.execute(sql, (client_id,))
            trips = cursor.fetchall()
            conn.commit()
            return trips

    def add_client(self, client: NewClient) -> int:
        sql = """
            INSERT INTO client (first_name, last_name, email, telephone, pesel)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id_client
        """

        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (
                    client.first_name,
                    client.last_name,
                    client.email,
                    client.telephone,
                    client.pesel,
                ),
            )
            client_id = cursor.fetchone()[0]
            conn.commit()
            return client_id

    def add_registration(
        self, client_id: int, trip_id: int, registered_at: int
    ) -> RegisterOutcome:
        """
        Check preconditions and insert a registration in one transaction.

        The trip row stays locked from the FOR UPDATE until commit or
        rollback, covering the duplicate check, the count and the insert.

        Args:
            client_id: Client to register
            trip_id: Trip to register for
            registered_at: Registration date as YYYYMMDD integer

        Returns:
            RegisterOutcome indicating success or the failed check
        """
        # Clients are never deleted, so existence needs no lock
        client_sql = "SELECT 1 FROM client WHERE id_client = %s"

        # Serializes all registrations for this trip
        lock_trip_sql = "SELECT max_people FROM trip WHERE id_trip = %s FOR UPDATE"

        count_sql = "SELECT COUNT(*) FROM client_trip WHERE id_trip = %s"

        exists_sql = "SELECT 1 FROM client_trip WHERE id_client = %s AND id_trip = %s"

        insert_sql = """
            INSERT INTO client_trip (id_client, id_trip, registered_at, payment_date)
            VALUES (%s, %s, %s, NULL)
        """

        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(client_sql, (client_id,))
            if cursor.fetchone() is None:
                conn.commit()
                return RegisterOutcome.CLIENT_NOT_FOUND

            cursor.execute(lock_trip_sql, (trip_id,))
            row = cursor.fetchone()
            if row is None:
                conn.commit()
                return RegisterOutcome.TRIP_NOT_FOUND
            max_people = row[0]

            cursor.execute(exists_sql, (client_id, trip_id))
            if cursor.fetchone() is not None:
                conn.commit()
                return RegisterOutcome.ALREADY_REGISTERED

            cursor.execute(count_sql, (trip_id,))
            if cursor.fetchone()[0] >= max_people:
                conn.commit()
                return RegisterOutcome.TRIP_FULL

            try:
                cursor.execute(insert_sql, (client_id, trip_id, registered_at))
            except UniqueViolation:
                conn.rollback()
                return RegisterOutcome.ALREADY_REGISTERED

            conn.commit()
            return RegisterOutcome.SUCCESS

    def remove_registration(self, client_id: int, trip_id: int) -> bool:
        sql = "DELETE FROM client_trip WHERE id_client = %s AND id_trip = %s"

        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (client_id, trip_id))
            conn.commit()
            return cursor.rowcount == 1


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)
                conn.commit()

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
