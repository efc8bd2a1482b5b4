from __future__ import annotations

from collections.abc import Callable

from labreserve.core.exceptions import NotFoundError
from labreserve.dto import EquipmentDTO
from labreserve.dto.mappers import map_equipment
from labreserve.infra.unit_of_work import UnitOfWork


class EquipmentService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list(self) -> list[EquipmentDTO]:
        async with self._uow_factory() as uow:
            rows = await uow.equipment.list_all()
        return [map_equipment(row) for row in rows]

    async def get(self, equipment_id: int) -> EquipmentDTO:
        async with self._uow_factory() as uow:
            row = await uow.equipment.get(equipment_id)
        if row is None:
            raise NotFoundError("Equipment not found")
        return map_equipment(row)
