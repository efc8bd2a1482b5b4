from .auth import LoginRequest
from .common import ErrorResponse, OkResponse
from .reservation import ReservationCreateRequest, ReservationUpdateRequest

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "OkResponse",
    "ReservationCreateRequest",
    "ReservationUpdateRequest",
]
