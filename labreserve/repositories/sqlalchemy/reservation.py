"""SQLAlchemy implementation of the reservation repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labreserve.models import STATUS_ACTIVE, Equipment, Reservation, User
from labreserve.repositories.interfaces import ReservationRepository, ReservationRow

from ._errors import translate_db_error

_UPDATABLE = frozenset({"start_time", "end_time", "status"})


def _enriched_select():
    return (
        select(
            Reservation.id,
            Reservation.equipment_id,
            Reservation.user_id,
            Reservation.start_time,
            Reservation.end_time,
            Reservation.status,
            Reservation.created_at,
            Reservation.updated_at,
            User.username.label("user_username"),
            Equipment.name.label("equipment_name"),
        )
        .join(User, User.id == Reservation.user_id)
        .join(Equipment, Equipment.id == Reservation.equipment_id)
    )


def _to_row(row) -> ReservationRow:
    return ReservationRow(
        id=int(row.id),
        equipment_id=int(row.equipment_id),
        user_id=int(row.user_id),
        start_time=row.start_time,
        end_time=row.end_time,
        status=str(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        user_username=row.user_username,
        equipment_name=row.equipment_name,
    )


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, reservation_id: int) -> ReservationRow | None:
        stmt = _enriched_select().where(Reservation.id == int(reservation_id))
        rows = await self._fetch(stmt)
        return rows[0] if rows else None

    async def list_all(self) -> list[ReservationRow]:
        stmt = _enriched_select().order_by(Reservation.start_time.asc(), Reservation.id.asc())
        return await self._fetch(stmt)

    async def list_by_equipment(self, equipment_id: int) -> list[ReservationRow]:
        stmt = (
            _enriched_select()
            .where(Reservation.equipment_id == int(equipment_id))
            .order_by(Reservation.start_time.asc(), Reservation.id.asc())
        )
        return await self._fetch(stmt)

    async def list_by_user(self, user_id: int) -> list[ReservationRow]:
        stmt = (
            _enriched_select()
            .where(Reservation.user_id == int(user_id))
            .order_by(Reservation.start_time.asc(), Reservation.id.asc())
        )
        return await self._fetch(stmt)

    async def list_active_touching(
        self,
        *,
        start: datetime,
        end: datetime,
        equipment_id: int | None = None,
    ) -> list[ReservationRow]:
        stmt = _enriched_select().where(
            Reservation.status == STATUS_ACTIVE,
            Reservation.start_time <= end,
            Reservation.end_time >= start,
        )
        if equipment_id is not None:
            stmt = stmt.where(Reservation.equipment_id == int(equipment_id))
        stmt = stmt.order_by(Reservation.start_time.asc(), Reservation.id.asc())
        return await self._fetch(stmt)

    async def find_overlapping_ids(
        self,
        *,
        equipment_id: int,
        start: datetime,
        end: datetime,
        exclude_reservation_id: int | None = None,
    ) -> list[int]:
        # Strict half-open overlap: existing.start < end AND existing.end > start
        stmt = select(Reservation.id).where(
            Reservation.equipment_id == int(equipment_id),
            Reservation.status == STATUS_ACTIVE,
            Reservation.start_time < end,
            Reservation.end_time > start,
        )
        if exclude_reservation_id is not None:
            stmt = stmt.where(Reservation.id != int(exclude_reservation_id))
        stmt = stmt.order_by(Reservation.start_time.asc(), Reservation.id.asc())
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        return [int(rid) for rid in result.scalars().all()]

    async def add(
        self,
        *,
        equipment_id: int,
        user_id: int,
        start_time: datetime,
        end_time: datetime,
        status: str,
    ) -> int:
        reservation = Reservation(
            equipment_id=int(equipment_id),
            user_id=int(user_id),
            start_time=start_time,
            end_time=end_time,
            status=status,
        )
        self._session.add(reservation)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        return int(reservation.id)

    async def update(self, reservation_id: int, values: dict[str, Any]) -> None:
        unknown = set(values) - _UPDATABLE
        if unknown:
            raise ValueError(f"cannot update reservation fields: {sorted(unknown)}")
        stmt = (
            update(Reservation)
            .where(Reservation.id == int(reservation_id))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc

    async def delete(self, reservation_id: int) -> None:
        stmt = delete(Reservation).where(Reservation.id == int(reservation_id))
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc

    async def _fetch(self, stmt) -> list[ReservationRow]:
        try:
            rows = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        return [_to_row(row) for row in rows.all()]
