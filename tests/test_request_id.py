from __future__ import annotations

import pytest


@pytest.mark.asyncio
async def test_request_id_echoes_back(app_client):
    rid = "test-123"
    res = await app_client.get("/healthz", headers={"X-Request-ID": rid})
    assert res.status_code == 200
    assert res.headers.get("X-Request-ID") == rid


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(app_client):
    res = await app_client.get("/healthz")
    assert res.status_code == 200
    rid = res.headers.get("X-Request-ID")
    assert isinstance(rid, str)
    assert len(rid) > 0  # UUID-like, non-empty


@pytest.mark.asyncio
async def test_security_headers_present(app_client):
    res = await app_client.get("/healthz")
    assert res.headers.get("X-Content-Type-Options") == "nosniff"
    assert res.headers.get("X-Frame-Options") == "DENY"
    # only API responses are marked uncacheable
    assert res.headers.get("Cache-Control") is None
