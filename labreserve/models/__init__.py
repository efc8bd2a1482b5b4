# Importing every model here lets Alembic and create_all() see the full metadata.
from .base import Base
from .equipment import Equipment
from .reservation import STATUS_ACTIVE, Reservation
from .user import User

__all__ = [
    "Base",
    "Equipment",
    "Reservation",
    "User",
    "STATUS_ACTIVE",
]
