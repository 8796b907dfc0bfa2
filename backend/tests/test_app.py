import httpx


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_correlation_id_is_generated(client):
    response = client.get("/")

    assert len(response.headers["X-Correlation-ID"]) == 36


def test_health_reports_hosted_service(client, hosted):
    response = client.get("/api/v1/health/")

    assert response.json()["status"] == "healthy"
    assert hosted.calls[0].path == "/auth/v1/health"


def test_health_degraded_when_hosted_service_fails(client, hosted, monkeypatch):
    monkeypatch.setattr(hosted, "_auth", lambda endpoint, call: httpx.Response(503, json={"msg": "down"}))

    body = client.get("/api/v1/health/").json()

    assert body["status"] == "degraded"
    assert body["hosted"] == {"status": "error", "detail": "down"}
