from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# Fields are optional at the schema level: missing values are reported by the
# service with the same 400 message for every field.
class ReservationCreateRequest(BaseModel):
    equipment_id: int | None = Field(default=None, description="Equipment to reserve")
    start_time: datetime | None = Field(default=None, description="ISO-8601 start (inclusive)")
    end_time: datetime | None = Field(default=None, description="ISO-8601 end (exclusive)")


class ReservationUpdateRequest(BaseModel):
    start_time: datetime | None = Field(default=None, description="New ISO-8601 start")
    end_time: datetime | None = Field(default=None, description="New ISO-8601 end")
    status: str | None = Field(default=None, max_length=32, description="e.g. 'active'")
