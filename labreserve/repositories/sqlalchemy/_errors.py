"""Translate SQLAlchemy failures into domain exceptions."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from labreserve.core.exceptions import ConflictError, DomainError, InfrastructureError
from labreserve.models.reservation import EXCLUSION_CONSTRAINT_NAME
from labreserve.models.user import USERNAME_CONSTRAINT_NAME

CONFLICT_MESSAGE = "Reservation conflicts with existing reservations"
USERNAME_TAKEN_MESSAGE = "Username already taken"


def translate_db_error(exc: SQLAlchemyError) -> DomainError:
    if isinstance(exc, IntegrityError):
        detail = str(exc.orig)
        if EXCLUSION_CONSTRAINT_NAME in detail:
            return ConflictError(CONFLICT_MESSAGE)
        if USERNAME_CONSTRAINT_NAME in detail:
            return ConflictError(USERNAME_TAKEN_MESSAGE)
    return InfrastructureError("database unavailable")
