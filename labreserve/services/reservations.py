"""Reservation lifecycle use cases: create, update, delete and reads."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from labreserve.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from labreserve.dto import ReservationDTO
from labreserve.dto.mappers import map_reservation
from labreserve.infra.locks import EquipmentLocks
from labreserve.infra.unit_of_work import UnitOfWork
from labreserve.models.reservation import STATUS_ACTIVE
from labreserve.repositories.interfaces import ReservationRow
from labreserve.services.conflicts import ConflictChecker
from labreserve.services.intervals import TimeInterval
from labreserve.utils.datetime import as_utc_naive

UnitOfWorkFactory = Callable[[], UnitOfWork]

MISSING_FIELDS_MESSAGE = "Equipment ID, start time, and end time are required"
NO_FIELDS_MESSAGE = "No fields to update"
CONFLICT_MESSAGE = "Reservation conflicts with existing reservations"

logger = structlog.get_logger(__name__)


class ReservationService:
    """Use cases around reservations.

    Every mutation runs inside one Unit of Work, so a failed check leaves
    storage untouched. Create and update additionally hold the equipment's
    lock from the conflict check until after the commit.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        locks: EquipmentLocks | None = None,
        checker: ConflictChecker | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks or EquipmentLocks()
        self._checker = checker or ConflictChecker()

    # --- reads ---

    async def list_all(self) -> list[ReservationDTO]:
        async with self._uow_factory() as uow:
            rows = await uow.reservations.list_all()
        return [map_reservation(row) for row in rows]

    async def list_by_equipment(self, equipment_id: int) -> list[ReservationDTO]:
        async with self._uow_factory() as uow:
            rows = await uow.reservations.list_by_equipment(equipment_id)
        return [map_reservation(row) for row in rows]

    async def list_by_user(self, user_id: int) -> list[ReservationDTO]:
        async with self._uow_factory() as uow:
            rows = await uow.reservations.list_by_user(user_id)
        return [map_reservation(row) for row in rows]

    async def get(self, reservation_id: int) -> ReservationDTO:
        async with self._uow_factory() as uow:
            row = await uow.reservations.get(reservation_id)
        if row is None:
            raise NotFoundError("Reservation not found")
        return map_reservation(row)

    # --- mutations ---

    async def create(
        self,
        *,
        user_id: int,
        equipment_id: int | None,
        start_time: datetime | None,
        end_time: datetime | None,
    ) -> ReservationDTO:
        # 0 is never a valid id and is reported like a missing one
        if not equipment_id or start_time is None or end_time is None:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        interval = TimeInterval.validated(as_utc_naive(start_time), as_utc_naive(end_time))

        async with self._locks.hold(equipment_id):
            async with self._uow_factory() as uow:
                equipment = await uow.equipment.get_for_update(equipment_id)
                if equipment is None:
                    raise NotFoundError("Equipment not found")
                if await self._checker.has_conflict(uow, equipment_id, interval):
                    raise ConflictError(CONFLICT_MESSAGE)
                reservation_id = await uow.reservations.add(
                    equipment_id=equipment_id,
                    user_id=user_id,
                    start_time=interval.start,
                    end_time=interval.end,
                    status=STATUS_ACTIVE,
                )
                row = await _require(uow, reservation_id)

        logger.info(
            "reservation_created",
            reservation_id=row.id,
            equipment_id=row.equipment_id,
            user_id=row.user_id,
            start_time=row.start_time.isoformat(),
            end_time=row.end_time.isoformat(),
        )
        return map_reservation(row)

    async def update(
        self,
        reservation_id: int,
        *,
        user_id: int,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        status: str | None = None,
    ) -> ReservationDTO:
        async with self._uow_factory() as uow:
            current = await _load_owned(uow, reservation_id, user_id, action="update")

        if start_time is None and end_time is None and not status:
            raise ValidationError(NO_FIELDS_MESSAGE)

        async with self._locks.hold(current.equipment_id):
            async with self._uow_factory() as uow:
                await uow.equipment.get_for_update(current.equipment_id)
                # re-read under the lock; it may have been deleted meanwhile
                current = await _load_owned(uow, reservation_id, user_id, action="update")

                values: dict[str, object] = {}
                if start_time is not None:
                    values["start_time"] = as_utc_naive(start_time)
                if end_time is not None:
                    values["end_time"] = as_utc_naive(end_time)
                if status:
                    values["status"] = status

                interval = TimeInterval.validated(
                    values.get("start_time", current.start_time),  # type: ignore[arg-type]
                    values.get("end_time", current.end_time),  # type: ignore[arg-type]
                )
                new_status = values.get("status", current.status)
                times_changed = start_time is not None or end_time is not None
                reactivated = current.status != STATUS_ACTIVE
                if new_status == STATUS_ACTIVE and (times_changed or reactivated):
                    if await self._checker.has_conflict(
                        uow,
                        current.equipment_id,
                        interval,
                        exclude_reservation_id=current.id,
                    ):
                        raise ConflictError(CONFLICT_MESSAGE)

                await uow.reservations.update(current.id, values)
                row = await _require(uow, current.id)

        logger.info(
            "reservation_updated",
            reservation_id=row.id,
            equipment_id=row.equipment_id,
            user_id=user_id,
            fields=sorted(values),
        )
        return map_reservation(row)

    async def delete(self, reservation_id: int, *, user_id: int) -> None:
        async with self._uow_factory() as uow:
            current = await _load_owned(uow, reservation_id, user_id, action="delete")
            await uow.reservations.delete(current.id)

        logger.info(
            "reservation_deleted",
            reservation_id=current.id,
            equipment_id=current.equipment_id,
            user_id=user_id,
        )


async def _load_owned(
    uow: UnitOfWork, reservation_id: int, user_id: int, *, action: str
) -> ReservationRow:
    row = await uow.reservations.get(reservation_id)
    if row is None:
        raise NotFoundError("Reservation not found")
    if row.user_id != user_id:
        raise ForbiddenError(f"Not authorized to {action} this reservation")
    return row


async def _require(uow: UnitOfWork, reservation_id: int) -> ReservationRow:
    row = await uow.reservations.get(reservation_id)
    if row is None:
        raise NotFoundError("Reservation not found")
    return row


__all__ = ["ReservationService", "UnitOfWorkFactory"]
