"""Router modules exposed for convenient imports."""

from . import auth, equipment, healthz, occupancy, readyz, reservations

__all__ = [
    "auth",
    "equipment",
    "healthz",
    "occupancy",
    "readyz",
    "reservations",
]
