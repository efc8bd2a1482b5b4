"""Reservation conflict detection."""

from __future__ import annotations

import structlog

from labreserve.infra.unit_of_work import UnitOfWork
from labreserve.services.intervals import TimeInterval

logger = structlog.get_logger(__name__)


class ConflictChecker:
    """Finds active reservations on one equipment overlapping a proposed interval.

    A conflict is a normal outcome reported as a list of reservation ids, never
    an exception. Storage failures propagate as ``InfrastructureError`` from
    the repository.
    """

    async def find_conflicts(
        self,
        uow: UnitOfWork,
        equipment_id: int,
        interval: TimeInterval,
        exclude_reservation_id: int | None = None,
    ) -> list[int]:
        conflicts = await uow.reservations.find_overlapping_ids(
            equipment_id=equipment_id,
            start=interval.start,
            end=interval.end,
            exclude_reservation_id=exclude_reservation_id,
        )
        if conflicts:
            logger.info(
                "reservation_conflict",
                equipment_id=equipment_id,
                start_time=interval.start.isoformat(),
                end_time=interval.end.isoformat(),
                conflicting_ids=conflicts,
            )
        return conflicts

    async def has_conflict(
        self,
        uow: UnitOfWork,
        equipment_id: int,
        interval: TimeInterval,
        exclude_reservation_id: int | None = None,
    ) -> bool:
        return bool(
            await self.find_conflicts(uow, equipment_id, interval, exclude_reservation_id)
        )
