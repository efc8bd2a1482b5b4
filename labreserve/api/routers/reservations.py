from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from labreserve.api.deps import get_current_user, get_reservation_service
from labreserve.dto import MessageDTO, ReservationDTO, UserDTO
from labreserve.schemas.common import ErrorResponse
from labreserve.schemas.reservation import ReservationCreateRequest, ReservationUpdateRequest
from labreserve.services.reservations import ReservationService

router = APIRouter(prefix="/api/reservations", tags=["reservations"])


@router.get("", response_model=list[ReservationDTO], summary="List all reservations")
async def list_reservations(
    _: UserDTO = Depends(get_current_user),
    svc: ReservationService = Depends(get_reservation_service),
):
    return await svc.list_all()


@router.get(
    "/equipment/{equipment_id}",
    response_model=list[ReservationDTO],
    summary="Reservations for one equipment",
)
async def list_equipment_reservations(
    equipment_id: int,
    _: UserDTO = Depends(get_current_user),
    svc: ReservationService = Depends(get_reservation_service),
):
    return await svc.list_by_equipment(equipment_id)


@router.get(
    "/user/{user_id}",
    response_model=list[ReservationDTO],
    summary="Reservations owned by one user",
)
async def list_user_reservations(
    user_id: int,
    _: UserDTO = Depends(get_current_user),
    svc: ReservationService = Depends(get_reservation_service),
):
    return await svc.list_by_user(user_id)


@router.get(
    "/{reservation_id}",
    response_model=ReservationDTO,
    responses={404: {"model": ErrorResponse}},
    summary="Get a reservation",
)
async def get_reservation(
    reservation_id: int,
    _: UserDTO = Depends(get_current_user),
    svc: ReservationService = Depends(get_reservation_service),
):
    return await svc.get(reservation_id)


@router.post(
    "",
    status_code=201,
    response_model=ReservationDTO,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Book equipment for the caller",
)
async def create_reservation(
    payload: ReservationCreateRequest,
    user: UserDTO = Depends(get_current_user),
    svc: ReservationService = Depends(get_reservation_service),
):
    return await svc.create(
        user_id=user.id,
        equipment_id=payload.equipment_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )


@router.put(
    "/{reservation_id}",
    response_model=ReservationDTO,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Change an own reservation's times or status",
)
async def update_reservation(
    reservation_id: int,
    payload: ReservationUpdateRequest | None = Body(default=None),
    user: UserDTO = Depends(get_current_user),
    svc: ReservationService = Depends(get_reservation_service),
):
    payload = payload or ReservationUpdateRequest()
    return await svc.update(
        reservation_id,
        user_id=user.id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        status=payload.status,
    )


@router.delete(
    "/{reservation_id}",
    response_model=MessageDTO,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete an own reservation",
)
async def delete_reservation(
    reservation_id: int,
    user: UserDTO = Depends(get_current_user),
    svc: ReservationService = Depends(get_reservation_service),
):
    await svc.delete(reservation_id, user_id=user.id)
    return MessageDTO(message="Reservation deleted")
