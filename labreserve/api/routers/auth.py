from __future__ import annotations

from fastapi import APIRouter, Depends

from labreserve.api.deps import get_auth_service, get_current_user
from labreserve.dto import LoginResultDTO, UserDTO
from labreserve.schemas.auth import LoginRequest
from labreserve.schemas.common import ErrorResponse
from labreserve.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResultDTO,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Log in (unknown usernames are registered)",
)
async def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return await auth.login(payload.username, payload.password)


@router.get("/me", response_model=UserDTO, summary="Current user")
async def me(user: UserDTO = Depends(get_current_user)):
    return user
