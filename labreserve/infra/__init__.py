"""Infrastructure helpers such as Unit of Work implementations."""

from .locks import EquipmentLocks
from .unit_of_work import SqlAlchemyUnitOfWork, UnitOfWork

__all__ = ["EquipmentLocks", "UnitOfWork", "SqlAlchemyUnitOfWork"]
