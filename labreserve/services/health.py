from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labreserve.core.exceptions import InfrastructureError


class HealthService:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def ok(self) -> dict:
        try:
            await self._session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            raise InfrastructureError("database unavailable") from exc
        return {"ok": True}
