from __future__ import annotations

import pytest

from labreserve.core.exceptions import InfrastructureError
from labreserve.services.conflicts import ConflictChecker
from labreserve.services.intervals import TimeInterval
from tests.fakes import InMemoryStore, at


@pytest.fixture
def booked(store: InMemoryStore) -> InMemoryStore:
    # equipment 1: [10:00, 11:00) active, [12:00, 13:00) inactive
    store.add_reservation(equipment_id=1, user_id=1, start_time=at(10), end_time=at(11))
    store.add_reservation(
        equipment_id=1, user_id=1, start_time=at(12), end_time=at(13), status="inactive"
    )
    return store


@pytest.mark.asyncio
async def test_overlap_on_same_equipment_is_reported(booked: InMemoryStore) -> None:
    checker = ConflictChecker()
    async with booked.unit_of_work() as uow:
        ids = await checker.find_conflicts(uow, 1, TimeInterval(at(10, 30), at(11, 30)))
    assert ids == [1]


@pytest.mark.asyncio
async def test_touching_interval_is_not_a_conflict(booked: InMemoryStore) -> None:
    checker = ConflictChecker()
    async with booked.unit_of_work() as uow:
        assert await checker.find_conflicts(uow, 1, TimeInterval(at(11), at(12))) == []
        assert await checker.find_conflicts(uow, 1, TimeInterval(at(9), at(10))) == []


@pytest.mark.asyncio
async def test_other_equipment_and_inactive_reservations_are_ignored(
    booked: InMemoryStore,
) -> None:
    checker = ConflictChecker()
    async with booked.unit_of_work() as uow:
        assert not await checker.has_conflict(uow, 2, TimeInterval(at(10), at(11)))
        assert not await checker.has_conflict(uow, 1, TimeInterval(at(12), at(13)))


@pytest.mark.asyncio
async def test_excluded_reservation_does_not_conflict_with_itself(booked: InMemoryStore) -> None:
    checker = ConflictChecker()
    async with booked.unit_of_work() as uow:
        interval = TimeInterval(at(10, 15), at(10, 45))
        assert await checker.has_conflict(uow, 1, interval)
        assert not await checker.has_conflict(uow, 1, interval, exclude_reservation_id=1)


@pytest.mark.asyncio
async def test_multiple_conflicts_are_ordered_by_start(store: InMemoryStore) -> None:
    store.add_reservation(equipment_id=1, user_id=1, start_time=at(14), end_time=at(15))
    store.add_reservation(equipment_id=1, user_id=2, start_time=at(9), end_time=at(10))
    checker = ConflictChecker()
    async with store.unit_of_work() as uow:
        ids = await checker.find_conflicts(uow, 1, TimeInterval(at(8), at(16)))
    assert ids == [2, 1]


@pytest.mark.asyncio
async def test_storage_failure_propagates_as_infrastructure_error(store: InMemoryStore) -> None:
    store.fail_reads = True
    checker = ConflictChecker()
    with pytest.raises(InfrastructureError):
        async with store.unit_of_work() as uow:
            await checker.find_conflicts(uow, 1, TimeInterval(at(10), at(11)))
