"""
Tests for the main application endpoints.
"""


def test_root_endpoint(client):
    """
    Test the root endpoint returns a welcome message.
    """
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data


def test_health_check(client):
    """
    Test the health check endpoint returns a healthy status.
    """
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "database" in data


def test_request_id_headers(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
    assert "X-Process-Time" in response.headers


def test_incoming_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert "error" in response.json()


def test_schema_validation_errors_are_400(client):
    response = client.post("/api/v1/users/register", json={"email": "not-an-email"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Validation error"
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"]
