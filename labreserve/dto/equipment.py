"""DTOs for equipment resources and the floor-plan status view."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EquipmentDTO(BaseModel):
    id: int = Field(description="Equipment ID")
    name: str = Field(description="Display name")
    type: str | None = Field(default=None, description="Instrument type (optional)")
    description: str | None = None
    active: bool = True

    model_config = ConfigDict(from_attributes=True)


class EquipmentStatusDTO(EquipmentDTO):
    in_use: bool = Field(description="An active reservation covers the current instant")
    current_user: str | None = Field(default=None, description="Username of the current holder")
    reservation_id: int | None = None
