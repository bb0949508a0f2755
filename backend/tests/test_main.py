"""Tests for app-level endpoints and error handling."""
from fastapi import status


def test_root(client):
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "Synthesis API"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "connected"


def test_validation_errors_are_400(client, auth_headers):
    response = client.post("/assignments", content="not json", headers={**auth_headers,
                                                                        "content-type": "application/json"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert isinstance(response.json()["detail"], list)


def test_cors_preflight(client):
    response = client.options(
        "/resources",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
