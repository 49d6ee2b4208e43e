import pytest
from fastapi.testclient import TestClient

from conftest import ALLOWED_ORIGIN
from python_backend.app import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["functions"] == ["create-checkout", "generate-plan", "send-email", "verify-session"]


def test_generate_plan_through_server(client: TestClient) -> None:
    response = client.post(
        "/api/generate-plan",
        json={"engine": "rules", "inputs": {"sessionsPerWeek": 4}},
        headers={"Origin": ALLOWED_ORIGIN},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
    assert response.json()["ok"] is True


def test_netlify_path_and_preflight(client: TestClient) -> None:
    response = client.options("/.netlify/functions/create-checkout", headers={"Origin": ALLOWED_ORIGIN})
    assert response.status_code == 204
    assert "POST" in response.headers["access-control-allow-methods"]


def test_query_reaches_handler(client: TestClient, monkeypatch) -> None:
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    response = client.get("/api/verify-session")
    assert response.status_code == 400
    assert response.json() == {"ok": False, "error": "Missing session id"}


def test_unknown_function_is_404(client: TestClient) -> None:
    assert client.post("/api/does-not-exist").status_code == 404
