"""SQLAlchemy implementation of the equipment repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labreserve.models import Equipment
from labreserve.repositories.interfaces import EquipmentRepository, EquipmentRow

from ._errors import translate_db_error

_COLUMNS = (
    Equipment.id,
    Equipment.name,
    Equipment.type,
    Equipment.description,
    Equipment.active,
)


def _to_row(row) -> EquipmentRow:
    return EquipmentRow(
        id=int(row.id),
        name=str(row.name),
        type=row.type,
        description=row.description,
        active=bool(row.active),
    )


class SqlAlchemyEquipmentRepository(EquipmentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, equipment_id: int) -> EquipmentRow | None:
        stmt = select(*_COLUMNS).where(Equipment.id == int(equipment_id))
        return await self._fetch_one(stmt)

    async def get_for_update(self, equipment_id: int) -> EquipmentRow | None:
        # FOR UPDATE is dropped by dialects without row locks (SQLite)
        stmt = select(*_COLUMNS).where(Equipment.id == int(equipment_id)).with_for_update()
        return await self._fetch_one(stmt)

    async def list_all(self) -> list[EquipmentRow]:
        stmt = select(*_COLUMNS).order_by(Equipment.id.asc())
        try:
            rows = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        return [_to_row(row) for row in rows.all()]

    async def _fetch_one(self, stmt) -> EquipmentRow | None:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        row = result.first()
        return _to_row(row) if row is not None else None
