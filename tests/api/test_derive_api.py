"""
POST /api/derive
"""
import pytest


async def test_derive_kgm3(client):
    response = await client.post(
        "/api/derive",
        json={"inputMode": "kgm3", "cementKgm3": 350, "waterKgm3": 175, "fineKgm3": 700, "coarseKgm3": 1100},
    )

    assert response.status_code == 200
    assert response.json() == {"wcRatio": 0.5, "mixRatioString": "1 : 2.00 : 3.14"}


async def test_derive_ratio_by_default(client):
    response = await client.post(
        "/api/derive",
        json={"ratioFine": "1.5", "ratioMedium": "1", "ratioCoarse": "3", "waterCementRatio": "0.5"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["wcRatio"] == pytest.approx(0.5)
    assert body["mixRatioString"] == "1 : 1.50 : 1.00 : 3.00"


async def test_derive_incomplete_form(client):
    response = await client.post("/api/derive", json={"inputMode": "kgm3", "cementKgm3": ""})

    assert response.status_code == 200
    assert response.json() == {"wcRatio": 0.0, "mixRatioString": ""}


async def test_derive_water_term_setting(client, settings):
    settings.mix_include_water_term = True

    response = await client.post(
        "/api/derive",
        json={"inputMode": "ratio", "ratioFine": 2, "ratioCoarse": 4, "waterCementRatio": 0.45},
    )

    assert response.json()["mixRatioString"] == "1 : 2.00 : 4.00 : 0.45"


async def test_derive_invalid_mode(client):
    response = await client.post("/api/derive", json={"inputMode": "litres"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input mode"


async def test_derive_does_not_store(client, row_store, settings):
    await client.post(
        "/api/derive",
        json={"inputMode": "kgm3", "cementKgm3": 350, "waterKgm3": 175, "fineKgm3": 700, "coarseKgm3": 1100},
    )

    assert await row_store.read_rows(settings.sheet_kgm3) == []


async def test_derive_body_must_be_an_object(client):
    response = await client.post("/api/derive", json=[1, 2])

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Request body must be a JSON object"}
