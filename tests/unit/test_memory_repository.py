"""
Unit tests for InMemoryTravelRepository.

Tests verify the adapter honors the same contract as the PostgreSQL
adapter: ordered precondition checks, capacity, uniqueness and the
empty-countries projection.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from src.adapters.repository.memory import InMemoryTravelRepository
from src.domain.catalog import TripCatalogService
from src.domain.exceptions import StorageUnavailable
from src.domain.ports import RegisterOutcome


def registered_to(repo: InMemoryTravelRepository, trip_id: int, client_ids: list[int]) -> list[int]:
    """Clients among client_ids currently registered to trip_id."""
    return [
        cid
        for cid in client_ids
        if any(t.trip_id == trip_id for t in repo.list_client_trips(cid))
    ]


@contextmanager
def trip_lock_held(repo: InMemoryTravelRepository, trip_id: int) -> Iterator[None]:
    """Hold a trip's registration lock from another thread, as a slow writer would."""
    held = threading.Event()
    release = threading.Event()

    def hold_lock() -> None:
        with repo._locked_trip(trip_id):
            held.set()
            release.wait(timeout=5)

    holder = threading.Thread(target=hold_lock)
    holder.start()
    try:
        assert held.wait(timeout=5)
        yield
    finally:
        release.set()
        holder.join()


class TestListTrips:
    def test_lists_all_trips_in_id_order(self, memory_repository: InMemoryTravelRepository) -> None:
        assert [t.id for t in memory_repository.list_trips()] == [1, 2]

    def test_trip_countries(self, memory_repository: InMemoryTravelRepository) -> None:
        trip = memory_repository.list_trips()[0]
        assert trip.countries == ["Italy", "Poland"]

    def test_trip_without_countries_has_empty_list(
        self, memory_repository: InMemoryTravelRepository
    ) -> None:
        trip = memory_repository.list_trips()[1]
        assert trip.countries == []

    def test_returned_countries_are_copies(
        self, memory_repository: InMemoryTravelRepository
    ) -> None:
        memory_repository.list_trips()[0].countries.append("Spain")
        assert memory_repository.list_trips()[0].countries == ["Italy", "Poland"]


class TestClients:
    def test_ids_are_sequential(self, memory_repository, client_factory) -> None:
        assert memory_repository.add_client(client_factory(1)) == 1
        assert memory_repository.add_client(client_factory(2)) == 2

    def test_client_exists(self, memory_repository, client_factory) -> None:
        client_id = memory_repository.add_client(client_factory(1))

        assert memory_repository.client_exists(client_id) is True
        assert memory_repository.client_exists(999) is False


class TestAddRegistration:
    def test_success(self, memory_repository, client_factory) -> None:
        client_id = memory_repository.add_client(client_factory(1))

        outcome = memory_repository.add_registration(client_id, 1, 20250409)

        assert outcome == RegisterOutcome.SUCCESS
        assert registered_to(memory_repository, 1, [client_id]) == [client_id]

    def test_unknown_client_checked_first(self, memory_repository) -> None:
        assert memory_repository.add_registration(999, 999, 20250409) == (
            RegisterOutcome.CLIENT_NOT_FOUND
        )

    def test_unknown_trip(self, memory_repository, client_factory) -> None:
        client_id = memory_repository.add_client(client_factory(1))

        assert memory_repository.add_registration(client_id, 999, 20250409) == (
            RegisterOutcome.TRIP_NOT_FOUND
        )

    def test_full_trip(self, memory_repository, client_factory) -> None:
        ids = [memory_repository.add_client(client_factory(n)) for n in range(3)]
        memory_repository.add_registration(ids[0], 1, 20250409)
        memory_repository.add_registration(ids[1], 1, 20250409)

        assert memory_repository.add_registration(ids[2], 1, 20250409) == (
            RegisterOutcome.TRIP_FULL
        )
        assert registered_to(memory_repository, 1, ids) == ids[:2]

    def test_duplicate_checked_before_capacity(self, memory_repository, client_factory) -> None:
        """A registered client retrying on a full trip sees ALREADY_REGISTERED."""
        ids = [memory_repository.add_client(client_factory(n)) for n in range(2)]
        memory_repository.add_registration(ids[0], 1, 20250409)
        memory_repository.add_registration(ids[1], 1, 20250409)

        assert memory_repository.add_registration(ids[0], 1, 20250409) == (
            RegisterOutcome.ALREADY_REGISTERED
        )

    def test_duplicate(self, memory_repository, client_factory) -> None:
        client_id = memory_repository.add_client(client_factory(1))
        memory_repository.add_registration(client_id, 2, 20250409)

        assert memory_repository.add_registration(client_id, 2, 20250409) == (
            RegisterOutcome.ALREADY_REGISTERED
        )
        assert len(memory_repository.list_client_trips(client_id)) == 1


class TestRemoveRegistration:
    def test_remove_existing(self, memory_repository, client_factory) -> None:
        client_id = memory_repository.add_client(client_factory(1))
        memory_repository.add_registration(client_id, 1, 20250409)

        assert memory_repository.remove_registration(client_id, 1) is True
        assert registered_to(memory_repository, 1, [client_id]) == []

    def test_remove_missing(self, memory_repository) -> None:
        assert memory_repository.remove_registration(1, 1) is False

    def test_remove_unknown_trip(self, memory_repository) -> None:
        assert memory_repository.remove_registration(1, 999) is False


class TestListClientTrips:
    def test_projection_includes_registration_dates(
        self, memory_repository, client_factory
    ) -> None:
        client_id = memory_repository.add_client(client_factory(1))
        memory_repository.add_registration(client_id, 2, 20250409)
        memory_repository.add_registration(client_id, 1, 20250410)

        trips = memory_repository.list_client_trips(client_id)

        assert [t.trip_id for t in trips] == [1, 2]
        assert trips[0].registered_at == 20250410
        assert trips[0].payment_date is None
        assert trips[1].max_people == 5

    def test_client_without_registrations(self, memory_repository, client_factory) -> None:
        client_id = memory_repository.add_client(client_factory(1))
        assert memory_repository.list_client_trips(client_id) == []


class TestLockTimeout:
    def test_held_trip_lock_surfaces_storage_unavailable(
        self, trip_factory, client_factory
    ) -> None:
        """A trip lock that cannot be acquired in time is reported, not waited on forever."""
        repo = InMemoryTravelRepository(lock_timeout_seconds=0.05)
        repo.add_trip(trip_factory(1))
        client_id = repo.add_client(client_factory(1))

        with trip_lock_held(repo, 1):
            with pytest.raises(StorageUnavailable):
                repo.add_registration(client_id, 1, 20250409)

    def test_other_trips_not_blocked(self, trip_factory, client_factory) -> None:
        """Holding one trip's lock does not block registration for another trip."""
        repo = InMemoryTravelRepository(lock_timeout_seconds=0.05)
        repo.add_trip(trip_factory(1))
        repo.add_trip(trip_factory(2))
        client_id = repo.add_client(client_factory(1))

        with trip_lock_held(repo, 1):
            assert repo.add_registration(client_id, 2, 20250409) == RegisterOutcome.SUCCESS

    def test_client_trips_readable_while_writer_holds_lock(
        self, trip_factory, client_factory
    ) -> None:
        """Listing a client's trips never waits on a registration in progress."""
        repo = InMemoryTravelRepository(lock_timeout_seconds=0.05)
        repo.add_trip(trip_factory(1))
        repo.add_trip(trip_factory(2))
        client_id = repo.add_client(client_factory(1))
        repo.add_registration(client_id, 2, 20250409)

        with trip_lock_held(repo, 1), trip_lock_held(repo, 2):
            trips = TripCatalogService(repo).list_trips_for_client(client_id)

        assert [t.trip_id for t in trips] == [2]
