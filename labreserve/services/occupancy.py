"""Slot-grid and "currently in use" views derived from reservations.

These views use the inclusive display predicate (see ``intervals``), so they
can mark a slot as occupied that a booking at that instant would not conflict
with.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time, timedelta

from labreserve.core.exceptions import NotFoundError
from labreserve.dto import (
    DayOccupancyDTO,
    EquipmentOccupancyDTO,
    EquipmentStatusDTO,
    SlotDTO,
)
from labreserve.infra.unit_of_work import UnitOfWork
from labreserve.models.reservation import STATUS_ACTIVE
from labreserve.repositories.interfaces import EquipmentRow, ReservationRow
from labreserve.services.intervals import TimeInterval, contains_inclusive
from labreserve.utils.datetime import utcnow

SLOT_MINUTES = 30

UnitOfWorkFactory = Callable[[], UnitOfWork]


def time_slots(step_minutes: int = SLOT_MINUTES) -> list[str]:
    """Slot labels for one day: "00:00", "00:30", ..., "23:30"."""
    if step_minutes <= 0 or (24 * 60) % step_minutes:
        raise ValueError("step_minutes must divide a day evenly")
    return [
        f"{minutes // 60:02d}:{minutes % 60:02d}" for minutes in range(0, 24 * 60, step_minutes)
    ]


def slot_instant(day: date, label: str) -> datetime:
    hours, minutes = label.split(":")
    return datetime.combine(day, time(int(hours), int(minutes)))


def slot_reservation(
    reservations: Iterable[ReservationRow], equipment_id: int, instant: datetime
) -> ReservationRow | None:
    for reservation in reservations:
        if reservation.equipment_id != equipment_id or reservation.status != STATUS_ACTIVE:
            continue
        interval = TimeInterval(reservation.start_time, reservation.end_time)
        if contains_inclusive(interval, instant):
            return reservation
    return None


def build_day_grid(
    day: date,
    equipment: Sequence[EquipmentRow],
    reservations: Sequence[ReservationRow],
    step_minutes: int = SLOT_MINUTES,
) -> DayOccupancyDTO:
    labels = time_slots(step_minutes)
    items: list[EquipmentOccupancyDTO] = []
    for eq in equipment:
        own = [r for r in reservations if r.equipment_id == eq.id]
        slots: list[SlotDTO] = []
        for label in labels:
            hit = slot_reservation(own, eq.id, slot_instant(day, label))
            slots.append(
                SlotDTO(
                    time=label,
                    reserved=hit is not None,
                    reservation_id=hit.id if hit else None,
                    user_id=hit.user_id if hit else None,
                    user_username=hit.user_username if hit else None,
                )
            )
        items.append(EquipmentOccupancyDTO(equipment_id=eq.id, equipment_name=eq.name, slots=slots))
    return DayOccupancyDTO(date=day.isoformat(), slot_minutes=step_minutes, equipment=items)


def equipment_in_use(
    equipment: Sequence[EquipmentRow],
    reservations: Sequence[ReservationRow],
    now: datetime,
) -> list[EquipmentStatusDTO]:
    out: list[EquipmentStatusDTO] = []
    for eq in equipment:
        hit = slot_reservation(reservations, eq.id, now)
        out.append(
            EquipmentStatusDTO(
                id=eq.id,
                name=eq.name,
                type=eq.type,
                description=eq.description,
                active=eq.active,
                in_use=hit is not None,
                current_user=hit.user_username if hit else None,
                reservation_id=hit.id if hit else None,
            )
        )
    return out


class OccupancyService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    async def day(self, day: date, equipment_id: int | None = None) -> DayOccupancyDTO:
        """Grid for the UTC day ``day``: reservations touching [00:00, 24:00] UTC."""
        window_start = datetime.combine(day, time.min)
        window_end = window_start + timedelta(days=1)
        async with self._uow_factory() as uow:
            if equipment_id is not None:
                eq = await uow.equipment.get(equipment_id)
                if eq is None:
                    raise NotFoundError("Equipment not found")
                equipment = [eq]
            else:
                equipment = await uow.equipment.list_all()
            reservations = await uow.reservations.list_active_touching(
                start=window_start, end=window_end, equipment_id=equipment_id
            )
        return build_day_grid(day, equipment, reservations)

    async def equipment_status(self) -> list[EquipmentStatusDTO]:
        now = self._clock()
        async with self._uow_factory() as uow:
            equipment = await uow.equipment.list_all()
            reservations = await uow.reservations.list_active_touching(start=now, end=now)
        return equipment_in_use(equipment, reservations, now)


__all__ = [
    "SLOT_MINUTES",
    "OccupancyService",
    "build_day_grid",
    "equipment_in_use",
    "slot_instant",
    "slot_reservation",
    "time_slots",
]
