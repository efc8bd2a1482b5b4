"""Per-equipment locks serializing check-then-write booking sequences."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class EquipmentLocks:
    """Registry of one asyncio.Lock per equipment id.

    Covers concurrent requests inside one process; across processes the
    equipment row lock and the PostgreSQL exclusion constraint take over.
    An entry lives only while some request holds or waits for it, so ids
    that never exist do not accumulate.
    """

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._holders: dict[int, int] = {}

    @asynccontextmanager
    async def hold(self, equipment_id: int) -> AsyncIterator[None]:
        key = int(equipment_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
