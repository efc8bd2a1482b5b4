from __future__ import annotations

from sqlalchemy import DDL, Column, DateTime, ForeignKey, Index, Integer, String, event
from sqlalchemy.sql import func

from labreserve.models.base import Base

STATUS_ACTIVE = "active"

EXCLUSION_CONSTRAINT_NAME = "ex_reservations_active_no_overlap"


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True)
    equipment_id = Column(
        Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # naive UTC, half-open [start_time, end_time)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default=STATUS_ACTIVE, server_default=STATUS_ACTIVE)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_reservations_equipment_status_start", "equipment_id", "status", "start_time"),
    )


# PostgreSQL only: storage-level guard against double booking. Mirrors the
# Alembic revision so metadata.create_all() in tests builds the same schema.
event.listen(
    Reservation.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Reservation.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE reservations ADD CONSTRAINT {EXCLUSION_CONSTRAINT_NAME} "
        "EXCLUDE USING gist (equipment_id WITH =, tsrange(start_time, end_time, '[)') WITH &&) "
        "WHERE (status = 'active')"
    ).execute_if(dialect="postgresql"),
)
