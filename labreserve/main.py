from __future__ import annotations

from contextlib import asynccontextmanager

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.starlette import StarletteIntegration
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from labreserve.api import errors
from labreserve.api.routers.auth import router as auth_router
from labreserve.api.routers.equipment import router as equipment_router
from labreserve.api.routers.healthz import router as healthz_router
from labreserve.api.routers.occupancy import router as occupancy_router
from labreserve.api.routers.readyz import router as readyz_router
from labreserve.api.routers.reservations import router as reservations_router
from labreserve.core.config import Settings
from labreserve.db import Database
from labreserve.infra.locks import EquipmentLocks
from labreserve.logging import setup_logging
from labreserve.middleware.rate_limit import limiter, rate_limit_middleware
from labreserve.middleware.request_id import request_id_middleware
from labreserve.middleware.security_headers import security_headers_middleware


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    # Initialize structured logging first
    setup_logging()
    settings = settings or Settings()

    # Sentry is a no-op when the DSN is missing
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.app_env,
            release=settings.release,
            integrations=[StarletteIntegration()],
            traces_sample_rate=settings.traces_rate,
            send_default_pii=False,
        )

    # Storage handle and booking locks are created here, once per app
    db = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        await db.dispose()

    app = FastAPI(title="Lab Equipment Reservations", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db
    app.state.uow_factory = db.unit_of_work
    app.state.equipment_locks = EquipmentLocks()
    app.state.limiter = limiter

    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(rate_limit_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=["*"],
    )

    errors.install(app)

    app.include_router(auth_router)
    app.include_router(reservations_router)
    app.include_router(equipment_router)
    app.include_router(occupancy_router)
    app.include_router(healthz_router)
    app.include_router(readyz_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "env": settings.app_env}

    @app.exception_handler(RateLimitExceeded)
    async def _rate_limit_handler(request: Request, exc: RateLimitExceeded):
        info = getattr(request.state, "rate_limit_info", None)
        if not isinstance(info, dict):
            info = {
                "method": request.method,
                "ip": (request.client.host if request.client else None) or "-",
                "limit": "-",
            }
        return JSONResponse(
            status_code=429,
            content={
                "error": {
                    "code": "rate_limited",
                    "message": "Too Many Requests",
                    "detail": info,
                }
            },
        )

    structlog.get_logger(__name__).info("app_startup", env=settings.app_env)
    return app
