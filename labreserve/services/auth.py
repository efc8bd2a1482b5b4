"""Login and bearer-token handling.

Unknown usernames are registered on first login; known ones must match the
stored password hash.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt
import structlog
from werkzeug.security import check_password_hash, generate_password_hash

from labreserve.core.exceptions import AuthenticationError, ConflictError, ValidationError
from labreserve.dto import LoginResultDTO, UserDTO
from labreserve.dto.mappers import map_user
from labreserve.infra.unit_of_work import UnitOfWork
from labreserve.repositories.interfaces import UserRow

logger = structlog.get_logger(__name__)


class AuthService:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        *,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 24 * 60,
    ) -> None:
        self._uow_factory = uow_factory
        self._secret = secret
        self._algorithm = algorithm
        self._expires = timedelta(minutes=expires_minutes)

    async def login(self, username: str | None, password: str | None) -> LoginResultDTO:
        if not username or not password:
            raise ValidationError("Username and password are required")

        try:
            user, registered = await self._find_or_register(username, password)
        except ConflictError:
            # a concurrent first login registered the same username; check against it
            user, registered = await self._find_or_register(username, password)
        if registered:
            logger.info("user_registered", user_id=user.id, username=user.username)

        return LoginResultDTO(token=self.issue_token(user.id), user=map_user(user))

    async def _find_or_register(self, username: str, password: str) -> tuple[UserRow, bool]:
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_username(username)
            if user is not None:
                if not check_password_hash(user.password_hash, password):
                    raise AuthenticationError("Invalid credentials")
                return user, False
            user = await uow.users.add(
                username=username, password_hash=generate_password_hash(password)
            )
        return user, True

    def issue_token(self, user_id: int) -> str:
        now = datetime.now(UTC)
        payload = {"sub": str(user_id), "iat": now, "exp": now + self._expires}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> int:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return int(payload["sub"])
        except (jwt.PyJWTError, KeyError, ValueError) as exc:
            raise AuthenticationError("Invalid token") from exc

    async def current_user(self, token: str) -> UserDTO:
        user_id = self.decode_token(token)
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return map_user(user)
