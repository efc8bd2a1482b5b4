"""DTOs for the per-day slot occupancy grid."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SlotDTO(BaseModel):
    time: str = Field(description="Slot label, HH:MM")
    reserved: bool
    reservation_id: int | None = None
    user_id: int | None = None
    user_username: str | None = None


class EquipmentOccupancyDTO(BaseModel):
    equipment_id: int
    equipment_name: str
    slots: list[SlotDTO]


class DayOccupancyDTO(BaseModel):
    date: str = Field(description="Selected day, YYYY-MM-DD")
    slot_minutes: int
    equipment: list[EquipmentOccupancyDTO]
