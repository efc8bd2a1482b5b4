"""Utilities to map repository rows into DTOs."""

from __future__ import annotations

from datetime import datetime

from labreserve.dto.equipment import EquipmentDTO
from labreserve.dto.reservation import ReservationDTO
from labreserve.dto.user import UserDTO
from labreserve.repositories.interfaces import EquipmentRow, ReservationRow, UserRow
from labreserve.utils.datetime import as_utc_aware


def _iso(dt: datetime | None) -> str | None:
    aware = as_utc_aware(dt)
    return aware.isoformat() if aware else None


def map_reservation(row: ReservationRow) -> ReservationDTO:
    return ReservationDTO(
        id=row.id,
        equipment_id=row.equipment_id,
        user_id=row.user_id,
        start_time=_iso(row.start_time) or "",
        end_time=_iso(row.end_time) or "",
        status=row.status,
        created_at=_iso(row.created_at),
        updated_at=_iso(row.updated_at),
        user_username=row.user_username,
        equipment_name=row.equipment_name,
    )


def map_equipment(row: EquipmentRow) -> EquipmentDTO:
    return EquipmentDTO(
        id=row.id,
        name=row.name,
        type=row.type,
        description=row.description,
        active=row.active,
    )


def map_user(row: UserRow) -> UserDTO:
    return UserDTO(id=row.id, username=row.username, name=row.name, email=row.email)
