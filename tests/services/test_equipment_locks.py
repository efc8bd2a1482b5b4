from __future__ import annotations

import asyncio

import pytest

from labreserve.infra.locks import EquipmentLocks


@pytest.mark.asyncio
async def test_hold_serializes_same_equipment_only():
    locks = EquipmentLocks()
    order: list[str] = []

    async def worker(name: str, equipment_id: int):
        async with locks.hold(equipment_id):
            order.append(f"{name}-in")
            await asyncio.sleep(0)
            order.append(f"{name}-out")

    await asyncio.gather(worker("a", 1), worker("b", 1))
    assert order == ["a-in", "a-out", "b-in", "b-out"]

    order.clear()
    await asyncio.gather(worker("a", 1), worker("c", 2))
    assert order == ["a-in", "c-in", "a-out", "c-out"]


@pytest.mark.asyncio
async def test_entry_lives_while_held_or_awaited():
    locks = EquipmentLocks()
    first_in = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with locks.hold(7):
            first_in.set()
            await release.wait()

    async def waiter():
        async with locks.hold(7):
            pass

    tasks = [asyncio.create_task(holder())]
    await first_in.wait()
    tasks.append(asyncio.create_task(waiter()))
    await asyncio.sleep(0)
    assert len(locks) == 1

    release.set()
    await asyncio.gather(*tasks)
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_entry_is_dropped_when_body_raises():
    locks = EquipmentLocks()
    with pytest.raises(RuntimeError):
        async with locks.hold(3):
            raise RuntimeError("boom")
    assert len(locks) == 0
