from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from labreserve.api.deps import get_async_session


@pytest.mark.asyncio
async def test_healthz_ok(app_client):
    resp = await app_client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


@pytest.mark.asyncio
async def test_health_reports_env(app_client):
    resp = await app_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "env": "test"}


@pytest.mark.asyncio
async def test_readyz_ok(app, app_client):
    session = AsyncMock()

    async def _session():
        yield session

    app.dependency_overrides[get_async_session] = _session
    resp = await app_client.get("/readyz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    session.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_readyz_returns_503_when_database_unreachable(app, app_client):
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, ConnectionRefusedError())

    async def _session():
        yield session

    app.dependency_overrides[get_async_session] = _session
    resp = await app_client.get("/readyz")
    assert resp.status_code == 503
    assert resp.json() == {
        "error": {
            "code": "database_unavailable",
            "message": "Database is not reachable",
        }
    }
