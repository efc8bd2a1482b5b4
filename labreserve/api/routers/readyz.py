from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from labreserve.api.deps import get_async_session
from labreserve.core.exceptions import InfrastructureError
from labreserve.schemas.common import OkResponse
from labreserve.services.health import HealthService

router = APIRouter(prefix="/readyz", tags=["health"])


@router.get(
    "",
    response_model=OkResponse,
    summary="Readiness probe",
    description="Runs SELECT 1 against the database; 503 when it is unreachable.",
)
async def readyz(session: AsyncSession = Depends(get_async_session)):
    svc = HealthService(session)
    try:
        return await svc.ok()
    except InfrastructureError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": {
                    "code": "database_unavailable",
                    "message": "Database is not reachable",
                }
            },
        )
