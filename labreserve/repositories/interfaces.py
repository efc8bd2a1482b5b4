"""Repository abstractions for the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


@dataclass
class UserRow:
    id: int
    username: str
    password_hash: str
    name: str | None = None
    email: str | None = None


@dataclass
class EquipmentRow:
    id: int
    name: str
    type: str | None = None
    description: str | None = None
    active: bool = True


@dataclass
class ReservationRow:
    """Reservation joined with its owner's username and the equipment name."""

    id: int
    equipment_id: int
    user_id: int
    start_time: datetime
    end_time: datetime
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user_username: str | None = None
    equipment_name: str | None = None


class UserRepository(Protocol):
    async def get(self, user_id: int) -> UserRow | None: ...

    async def get_by_username(self, username: str) -> UserRow | None: ...

    async def add(self, *, username: str, password_hash: str) -> UserRow: ...


class EquipmentRepository(Protocol):
    async def get(self, equipment_id: int) -> EquipmentRow | None: ...

    async def get_for_update(self, equipment_id: int) -> EquipmentRow | None:
        """Fetch the equipment row and hold a row lock until the transaction ends."""
        ...

    async def list_all(self) -> list[EquipmentRow]: ...


class ReservationRepository(Protocol):
    async def get(self, reservation_id: int) -> ReservationRow | None: ...

    async def list_all(self) -> list[ReservationRow]: ...

    async def list_by_equipment(self, equipment_id: int) -> list[ReservationRow]: ...

    async def list_by_user(self, user_id: int) -> list[ReservationRow]: ...

    async def list_active_touching(
        self,
        *,
        start: datetime,
        end: datetime,
        equipment_id: int | None = None,
    ) -> list[ReservationRow]:
        """Active reservations with start_time <= end and end_time >= start."""
        ...

    async def find_overlapping_ids(
        self,
        *,
        equipment_id: int,
        start: datetime,
        end: datetime,
        exclude_reservation_id: int | None = None,
    ) -> list[int]:
        """Ids of active reservations overlapping [start, end), ordered by start_time."""
        ...

    async def add(
        self,
        *,
        equipment_id: int,
        user_id: int,
        start_time: datetime,
        end_time: datetime,
        status: str,
    ) -> int: ...

    async def update(self, reservation_id: int, values: dict[str, Any]) -> None: ...

    async def delete(self, reservation_id: int) -> None: ...
