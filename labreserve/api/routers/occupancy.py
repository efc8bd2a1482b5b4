from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from labreserve.api.deps import get_current_user, get_occupancy_service
from labreserve.core.exceptions import ValidationError
from labreserve.dto import DayOccupancyDTO, UserDTO
from labreserve.schemas.common import ErrorResponse
from labreserve.services.occupancy import OccupancyService
from labreserve.utils.datetime import parse_day, utcnow

router = APIRouter(prefix="/api/occupancy", tags=["occupancy"])


@router.get(
    "",
    response_model=DayOccupancyDTO,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="30-minute slot grid for one UTC day",
    description="Slots and the day window are in UTC; without `date` the current UTC date is used.",
)
async def day_occupancy(
    day: str | None = Query(
        None, alias="date", description="UTC day, YYYY-MM-DD (defaults to the current UTC date)"
    ),
    equipment_id: int | None = Query(None, ge=1),
    _: UserDTO = Depends(get_current_user),
    svc: OccupancyService = Depends(get_occupancy_service),
):
    try:
        selected = parse_day(day) or utcnow().date()
    except ValueError as exc:
        raise ValidationError("date must be YYYY-MM-DD") from exc
    return await svc.day(selected, equipment_id=equipment_id)
