from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, true
from sqlalchemy.sql import func

from labreserve.models.base import Base


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)  # e.g. Confocal Microscope A
    type = Column(String, nullable=True)  # microscope | centrifuge | pcr | other
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
