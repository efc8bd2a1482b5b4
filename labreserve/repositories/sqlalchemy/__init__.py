"""SQLAlchemy implementations of repository interfaces."""

from .equipment import SqlAlchemyEquipmentRepository
from .reservation import SqlAlchemyReservationRepository
from .user import SqlAlchemyUserRepository

__all__ = [
    "SqlAlchemyEquipmentRepository",
    "SqlAlchemyReservationRepository",
    "SqlAlchemyUserRepository",
]
