"""Health routes — liveness and readiness against the test engine."""


async def test_health_check(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["service"] == "farmdata-api"


async def test_readiness_uses_database(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"
