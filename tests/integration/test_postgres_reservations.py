"""Runs against a real PostgreSQL when TEST_DATABASE_URL is set.

The database must allow ``CREATE EXTENSION btree_gist``. Tables are dropped
and recreated for every test.
"""

from __future__ import annotations

import asyncio
import os

import pytest
import pytest_asyncio

from labreserve.core.exceptions import ConflictError
from labreserve.db import Database
from labreserve.infra.locks import EquipmentLocks
from labreserve.models import Base, Equipment, User
from labreserve.services.reservations import ReservationService
from scripts.seed import SAMPLE_EQUIPMENT, seed
from tests.fakes import at

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not TEST_DATABASE_URL, reason="TEST_DATABASE_URL not set"),
]


@pytest_asyncio.fixture
async def database():
    db = Database(TEST_DATABASE_URL)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with db.session_factory() as session:
        session.add_all(
            [
                User(id=1, username="alice", password_hash="x"),
                User(id=2, username="bob", password_hash="x"),
                Equipment(id=1, name="Confocal Microscope A"),
            ]
        )
        await session.commit()
    yield db
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await db.dispose()


@pytest.mark.asyncio
async def test_create_and_read_back_enriched(database: Database):
    service = ReservationService(database.unit_of_work, EquipmentLocks())
    created = await service.create(user_id=1, equipment_id=1, start_time=at(10), end_time=at(11))

    fetched = await service.get(created.id)
    assert fetched.user_username == "alice"
    assert fetched.equipment_name == "Confocal Microscope A"
    assert fetched.created_at is not None


@pytest.mark.asyncio
async def test_row_lock_serializes_bookers_without_shared_process_lock(database: Database):
    # Separate lock registries stand in for two worker processes
    first = ReservationService(database.unit_of_work, EquipmentLocks())
    second = ReservationService(database.unit_of_work, EquipmentLocks())

    results = await asyncio.gather(
        first.create(user_id=1, equipment_id=1, start_time=at(10), end_time=at(11)),
        second.create(user_id=2, equipment_id=1, start_time=at(10, 30), end_time=at(11, 30)),
        return_exceptions=True,
    )

    assert sum(isinstance(r, ConflictError) for r in results) == 1
    assert sum(not isinstance(r, BaseException) for r in results) == 1


@pytest.mark.asyncio
async def test_exclusion_constraint_rejects_overlap_behind_the_service(database: Database):
    # Writes straight through the repository skip the service's conflict check
    async with database.unit_of_work() as uow:
        await uow.reservations.add(
            equipment_id=1, user_id=1, start_time=at(10), end_time=at(11), status="active"
        )

    with pytest.raises(ConflictError):
        async with database.unit_of_work() as uow:
            await uow.reservations.add(
                equipment_id=1,
                user_id=2,
                start_time=at(10, 30),
                end_time=at(11, 30),
                status="active",
            )

    # touching is allowed by the '[)' range, inactive rows are ignored
    async with database.unit_of_work() as uow:
        await uow.reservations.add(
            equipment_id=1, user_id=2, start_time=at(11), end_time=at(12), status="active"
        )
        await uow.reservations.add(
            equipment_id=1, user_id=2, start_time=at(10), end_time=at(11), status="cancelled"
        )


@pytest.mark.asyncio
async def test_seed_is_idempotent_by_name(database: Database):
    # the fixture already holds "Confocal Microscope A"
    assert await seed(database.url) == len(SAMPLE_EQUIPMENT) - 1
    assert await seed(database.url) == 0
