"""Public DTO exports for FastAPI response models."""

from .equipment import EquipmentDTO, EquipmentStatusDTO
from .occupancy import DayOccupancyDTO, EquipmentOccupancyDTO, SlotDTO
from .reservation import MessageDTO, ReservationDTO
from .user import LoginResultDTO, UserDTO

__all__ = [
    "DayOccupancyDTO",
    "EquipmentDTO",
    "EquipmentOccupancyDTO",
    "EquipmentStatusDTO",
    "LoginResultDTO",
    "MessageDTO",
    "ReservationDTO",
    "SlotDTO",
    "UserDTO",
]
