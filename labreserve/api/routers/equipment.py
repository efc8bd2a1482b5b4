from __future__ import annotations

from fastapi import APIRouter, Depends

from labreserve.api.deps import get_current_user, get_equipment_service, get_occupancy_service
from labreserve.dto import EquipmentDTO, EquipmentStatusDTO, UserDTO
from labreserve.schemas.common import ErrorResponse
from labreserve.services.equipment import EquipmentService
from labreserve.services.occupancy import OccupancyService

router = APIRouter(prefix="/api/equipment", tags=["equipment"])


@router.get("", response_model=list[EquipmentDTO], summary="List equipment")
async def list_equipment(
    _: UserDTO = Depends(get_current_user),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return await svc.list()


@router.get(
    "/status",
    response_model=list[EquipmentStatusDTO],
    summary="Floor-plan view: which equipment is in use right now",
)
async def equipment_status(
    _: UserDTO = Depends(get_current_user),
    svc: OccupancyService = Depends(get_occupancy_service),
):
    return await svc.equipment_status()


@router.get(
    "/{equipment_id}",
    response_model=EquipmentDTO,
    responses={404: {"model": ErrorResponse}},
    summary="Get equipment",
)
async def get_equipment(
    equipment_id: int,
    _: UserDTO = Depends(get_current_user),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return await svc.get(equipment_id)
