"""SQLAlchemy implementation of the user repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labreserve.models import User
from labreserve.repositories.interfaces import UserRepository, UserRow

from ._errors import translate_db_error


def _to_row(user: User) -> UserRow:
    return UserRow(
        id=int(user.id),
        username=str(user.username),
        password_hash=str(user.password_hash),
        name=user.name,
        email=user.email,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int) -> UserRow | None:
        try:
            user = await self._session.get(User, int(user_id))
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        return _to_row(user) if user is not None else None

    async def get_by_username(self, username: str) -> UserRow | None:
        try:
            result = await self._session.execute(select(User).where(User.username == username))
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        user = result.scalar_one_or_none()
        return _to_row(user) if user is not None else None

    async def add(self, *, username: str, password_hash: str) -> UserRow:
        user = User(username=username, password_hash=password_hash)
        self._session.add(user)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc
        return _to_row(user)
