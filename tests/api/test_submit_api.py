"""
POST /api/submit
"""
import pytest

from mixintake.services.row_store import RowStoreError


async def test_submit_kgm3(client, payloads):
    response = await client.post("/api/submit", json=payloads.kgm3())

    assert response.status_code == 200
    body = response.json()
    assert body == {
        "success": True,
        "message": "Record saved successfully",
        "recordId": "UNILAG-CL-K000001",
        "wcRatio": 0.5,
        "mixRatioString": "1 : 2.00 : 3.14",
    }


async def test_submit_ratio(client, payloads):
    response = await client.post("/api/submit", json=payloads.ratio())

    assert response.status_code == 200
    body = response.json()
    assert body["recordId"] == "UNILAG-CL-R000001"
    assert body["wcRatio"] == pytest.approx(0.45)
    assert body["mixRatioString"] == "1 : 2.00 : 4.00"


async def test_second_submission_increments(client, payloads):
    first = await client.post("/api/submit", json=payloads.kgm3())
    second = await client.post("/api/submit", json=payloads.kgm3())

    assert first.json()["recordId"] == "UNILAG-CL-K000001"
    assert second.json()["recordId"] == "UNILAG-CL-K000002"


async def test_missing_field(client, payloads):
    payload = payloads.kgm3()
    del payload["cubesCount"]

    response = await client.post("/api/submit", json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing required field: cubesCount"}


async def test_missing_mode_field(client, payloads):
    payload = payloads.kgm3(coarseKgm3="  ")

    response = await client.post("/api/submit", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required field (kg/m3 mode): coarseKgm3"


async def test_invalid_input_mode(client, payloads, row_store, settings):
    response = await client.post("/api/submit", json=payloads.kgm3(inputMode="tonnes"))

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid input mode"}
    assert await row_store.read_rows(settings.sheet_kgm3) == []


async def test_zero_cement_still_saved(client, payloads):
    response = await client.post("/api/submit", json=payloads.kgm3(cementKgm3=0))

    assert response.status_code == 200
    body = response.json()
    assert body["wcRatio"] == 0
    assert body["mixRatioString"] == ""


async def test_child_failure_reports_record_id(client, payloads, row_store, settings):
    real_append = row_store.append_rows

    async def failing_append(table, rows, unique_key=None, key_scope=None):
        if table == settings.sheet_admixtures:
            raise RowStoreError(table, "append", "rate limited")
        return await real_append(table, rows, unique_key, key_scope)

    row_store.append_rows = failing_append

    response = await client.post(
        "/api/submit",
        json=payloads.ratio(admixtures=[{"name": "Superplasticizer", "dosage": "1.2"}]),
    )

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["recordId"] == "UNILAG-CL-R000001"
    assert "admixtures" in body["message"]
    assert len(await row_store.read_rows(settings.sheet_ratio)) == 1


async def test_response_carries_request_id(client, payloads):
    response = await client.post(
        "/api/submit", json=payloads.kgm3(), headers={"X-Request-ID": "req-123"}
    )

    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in response.headers


@pytest.mark.parametrize("body", [[], [{"clientName": "x"}], "text", 42])
async def test_body_must_be_an_object(client, body, row_store, settings):
    response = await client.post("/api/submit", json=body)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Request body must be a JSON object"}
    assert await row_store.read_rows(settings.sheet_ratio) == []


async def test_malformed_json_body(client):
    response = await client.post(
        "/api/submit", content=b'{"clientName": ', headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Request body is not valid JSON"}


@pytest.mark.parametrize("field", ["admixtures", "scms"])
async def test_non_list_children_rejected(client, payloads, row_store, settings, field):
    response = await client.post("/api/submit", json=payloads.kgm3(**{field: "none"}))

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": f"Invalid value for field: {field}"}
    assert await row_store.read_rows(settings.sheet_kgm3) == []
