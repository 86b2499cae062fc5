"""
Health check endpoint tests
"""


def test_health_reports_connected_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert "timestamp" in body


def test_health_reports_unreachable_database(client, fake_db):
    fake_db.available = False

    response = client.get("/health")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["status"] == "unhealthy"
    assert body["database"] == "disconnected"
    assert body["error"] == "Connection refused"
    assert "timestamp" in body
