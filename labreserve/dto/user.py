from __future__ import annotations

from pydantic import BaseModel


class UserDTO(BaseModel):
    id: int
    username: str
    name: str | None = None
    email: str | None = None


class LoginResultDTO(BaseModel):
    token: str
    user: UserDTO
