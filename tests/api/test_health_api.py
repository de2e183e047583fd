from mixintake.api.deps import get_row_store


async def test_health(client):
    response = await client.get("/healthz")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "mixintake-api"


async def test_health_detailed(client):
    response = await client.get("/healthz/detailed")

    assert response.status_code == 200
    body = response.json()
    assert body["checks"]["row_store"]["status"] == "healthy"
    assert body["checks"]["configuration"]["status"] == "healthy"


async def test_health_detailed_unreachable_store(client):
    from mixintake.main import app

    class DownStore:
        async def ping(self):
            return False

    app.dependency_overrides[get_row_store] = lambda: DownStore()

    response = await client.get("/healthz/detailed")
    ready = await client.get("/healthz/ready")

    assert response.status_code == 503
    assert ready.status_code == 503


async def test_ready_and_live(client):
    assert (await client.get("/healthz/ready")).json()["status"] == "ready"
    assert (await client.get("/healthz/live")).json()["status"] == "alive"


async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Concrete Mix Intake API"
