"""DTOs for reservation resources exposed via the public API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ReservationDTO(BaseModel):
    id: int = Field(description="Reservation ID")
    equipment_id: int = Field(description="Reserved equipment")
    user_id: int = Field(description="Owner")
    start_time: str = Field(description="Start instant, ISO-8601 UTC (inclusive)")
    end_time: str = Field(description="End instant, ISO-8601 UTC (exclusive)")
    status: str = Field(description="Only 'active' reservations block the equipment")
    created_at: str | None = None
    updated_at: str | None = None
    user_username: str | None = Field(default=None, description="Owner's username")
    equipment_name: str | None = Field(default=None, description="Equipment display name")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 7,
                "equipment_id": 2,
                "user_id": 1,
                "start_time": "2024-06-03T10:00:00+00:00",
                "end_time": "2024-06-03T11:00:00+00:00",
                "status": "active",
                "created_at": "2024-06-01T08:12:44+00:00",
                "updated_at": "2024-06-01T08:12:44+00:00",
                "user_username": "alice",
                "equipment_name": "Confocal Microscope A",
            }
        },
    )


class MessageDTO(BaseModel):
    message: str
