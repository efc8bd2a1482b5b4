from __future__ import annotations

from datetime import timedelta

import pytest

from labreserve.utils.datetime import utcnow
from tests.fakes import InMemoryStore, at


@pytest.mark.asyncio
async def test_equipment_list_and_detail(app_client, auth_headers):
    r = await app_client.get("/api/equipment", headers=auth_headers(1))
    assert r.status_code == 200
    assert [e["name"] for e in r.json()] == ["Confocal Microscope A", "Ultracentrifuge"]

    one = await app_client.get("/api/equipment/2", headers=auth_headers(1))
    assert one.json()["type"] == "centrifuge"

    missing = await app_client.get("/api/equipment/42", headers=auth_headers(1))
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Equipment not found"}


@pytest.mark.asyncio
async def test_equipment_status_shows_current_user(
    app_client, auth_headers, store: InMemoryStore
):
    now = utcnow().replace(second=0, microsecond=0)
    store.add_reservation(
        equipment_id=1,
        user_id=2,
        start_time=now - timedelta(minutes=30),
        end_time=now + timedelta(minutes=30),
    )

    r = await app_client.get("/api/equipment/status", headers=auth_headers(1))
    assert r.status_code == 200
    by_id = {e["id"]: e for e in r.json()}
    assert by_id[1]["in_use"] is True
    assert by_id[1]["current_user"] == "bob"
    assert by_id[2]["in_use"] is False


@pytest.mark.asyncio
async def test_occupancy_grid_for_day(app_client, auth_headers, store: InMemoryStore):
    store.add_reservation(equipment_id=1, user_id=1, start_time=at(9), end_time=at(10))

    r = await app_client.get("/api/occupancy?date=2024-06-03", headers=auth_headers(1))
    assert r.status_code == 200
    body = r.json()
    assert body["date"] == "2024-06-03"
    assert body["slot_minutes"] == 30
    micro = body["equipment"][0]
    assert len(micro["slots"]) == 48
    assert [s["time"] for s in micro["slots"] if s["reserved"]] == ["09:00", "09:30", "10:00"]
    assert micro["slots"][18]["user_username"] == "alice"

    filtered = await app_client.get(
        "/api/occupancy", params={"date": "2024-06-03", "equipment_id": 2}, headers=auth_headers(1)
    )
    assert [e["equipment_id"] for e in filtered.json()["equipment"]] == [2]


@pytest.mark.asyncio
async def test_occupancy_defaults_to_today(app_client, auth_headers):
    r = await app_client.get("/api/occupancy", headers=auth_headers(1))
    assert r.status_code == 200
    assert r.json()["date"] == utcnow().date().isoformat()


@pytest.mark.asyncio
async def test_occupancy_rejects_bad_date_and_unknown_equipment(app_client, auth_headers):
    bad = await app_client.get("/api/occupancy?date=03/06/2024", headers=auth_headers(1))
    assert bad.status_code == 400

    unknown = await app_client.get(
        "/api/occupancy?date=2024-06-03&equipment_id=77", headers=auth_headers(1)
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_storage_failure_is_500_without_details(
    app_client, auth_headers, store: InMemoryStore
):
    headers = auth_headers(1)
    store.fail_reads = True
    r = await app_client.get("/api/reservations", headers=headers)
    assert r.status_code == 500
    assert r.json() == {"detail": "Server error"}


@pytest.mark.asyncio
async def test_occupancy_documents_utc_day(app_client):
    schema = (await app_client.get("/openapi.json")).json()
    operation = schema["paths"]["/api/occupancy"]["get"]
    assert "UTC" in operation["description"]
    date_param = next(p for p in operation["parameters"] if p["name"] == "date")
    assert "UTC" in date_param["description"]
