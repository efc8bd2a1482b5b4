"""Unit of Work abstraction used by the service layer."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labreserve.repositories.interfaces import (
    EquipmentRepository,
    ReservationRepository,
    UserRepository,
)
from labreserve.repositories.sqlalchemy import (
    SqlAlchemyEquipmentRepository,
    SqlAlchemyReservationRepository,
    SqlAlchemyUserRepository,
)
from labreserve.repositories.sqlalchemy._errors import translate_db_error


class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Defines the repository boundary exposed to services.

    One instance is one transaction: leaving the context commits, leaving it
    with an exception rolls everything back.
    """

    users: UserRepository
    equipment: EquipmentRepository
    reservations: ReservationRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of Work backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self.users: UserRepository
        self.equipment: EquipmentRepository
        self.reservations: ReservationRepository

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        session = self._session_factory()
        self._session = session
        self.users = SqlAlchemyUserRepository(session)
        self.equipment = SqlAlchemyEquipmentRepository(session)
        self.reservations = SqlAlchemyReservationRepository(session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is None:
            return
        try:
            if exc_type:
                await self._session.rollback()
            else:
                await self.commit()
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        if self._session is None:
            return
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise translate_db_error(exc) from exc

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork session is not initialized. Use within context manager.")
        return self._session
