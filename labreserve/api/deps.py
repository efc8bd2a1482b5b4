"""API dependency helpers and service providers.

Everything is resolved from ``request.app.state`` (populated by
``create_app``), so tests can swap the Unit-of-Work factory without touching
module globals.
"""

from collections.abc import AsyncIterator, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from labreserve.core.config import Settings
from labreserve.core.exceptions import AuthenticationError
from labreserve.dto import UserDTO
from labreserve.infra.locks import EquipmentLocks
from labreserve.infra.unit_of_work import UnitOfWork
from labreserve.services.auth import AuthService
from labreserve.services.equipment import EquipmentService
from labreserve.services.occupancy import OccupancyService
from labreserve.services.reservations import ReservationService

__all__ = [
    "get_async_session",
    "get_uow_factory",
    "get_auth_service",
    "get_current_user",
    "get_equipment_service",
    "get_occupancy_service",
    "get_reservation_service",
]

_bearer = HTTPBearer(auto_error=False)


async def get_async_session(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.db.session_factory() as session:
        yield session


def get_uow_factory(request: Request) -> Callable[[], UnitOfWork]:
    return request.app.state.uow_factory


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_locks(request: Request) -> EquipmentLocks:
    return request.app.state.equipment_locks


# --- Service providers for DI ---


def get_auth_service(
    uow_factory: Callable[[], UnitOfWork] = Depends(get_uow_factory),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(
        uow_factory,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expires_minutes,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthService = Depends(get_auth_service),
) -> UserDTO:
    """Resolve the caller from the `Authorization: Bearer <jwt>` header."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authentication required")
    return await auth.current_user(credentials.credentials)


def get_reservation_service(
    uow_factory: Callable[[], UnitOfWork] = Depends(get_uow_factory),
    locks: EquipmentLocks = Depends(get_locks),
) -> ReservationService:
    return ReservationService(uow_factory, locks)


def get_equipment_service(
    uow_factory: Callable[[], UnitOfWork] = Depends(get_uow_factory),
) -> EquipmentService:
    return EquipmentService(uow_factory)


def get_occupancy_service(
    uow_factory: Callable[[], UnitOfWork] = Depends(get_uow_factory),
) -> OccupancyService:
    return OccupancyService(uow_factory)
