"""Tests for the FastAPI endpoints and their security features."""

import pytest
from fastapi.testclient import TestClient

from tplog.api.main import create_app


SAMPLE_EVENTS = [
    {"ts": "2024-05-01T12:00:20.000Z", "message": "tp.target_left", "target": "P1"},
    {"ts": "2024-05-01T12:00:00.000Z", "message": "tp.success", "target": "P1",
     "origin": {"x": 0, "y": 0, "z": 0}},
    {"ts": "2024-05-01T12:00:04.000Z", "message": "manager.goal_updated", "tpTarget": "P1",
     "goal": {"x": 3, "y": 4, "z": 0}, "mode": "walk"},
]


@pytest.fixture
def client():
    """Create a test client without API key requirement."""
    app = create_app(require_api_key=False)
    return TestClient(app)


@pytest.fixture
def client_with_api_key(monkeypatch):
    """Create a test client WITH API key requirement."""
    monkeypatch.setenv("TPLOG_API_KEY", "test-secret-key")
    app = create_app(require_api_key=True)
    return TestClient(app)


class TestAnalyzeEndpoint:
    """Test POST /analyze."""

    def test_analyze_unsorted_events(self, client):
        """Events are sorted server-side before reconstruction."""
        response = client.post("/analyze", json={"events": SAMPLE_EVENTS})

        assert response.status_code == 200
        sessions = response.json()["sessions"]
        assert len(sessions) == 1
        s = sessions[0]
        assert s["player"] == "P1"
        assert s["startTime"] == "2024-05-01T12:00:00.000Z"
        assert s["durationSeconds"] == 20
        assert s["goalCount"] == 1
        assert s["avgDistanceFromOrigin"] == 5.0
        assert s["maxDistanceFromOrigin"] == 5.0
        assert s["modeCounts"] == {"walk": 1}

    def test_analyze_empty(self, client):
        response = client.post("/analyze", json={"events": []})

        assert response.status_code == 200
        assert response.json() == {"sessions": []}

    def test_analyze_ignores_unknown_messages(self, client):
        response = client.post("/analyze", json={"events": [
            {"ts": "2024-05-01T12:00:00Z", "message": "server.tick", "tps": 20},
        ]})

        assert response.status_code == 200
        assert response.json()["sessions"] == []

    def test_analyze_invalid_event(self, client):
        """Events missing ts are rejected by validation."""
        response = client.post("/analyze", json={"events": [{"message": "tp.success"}]})
        assert response.status_code == 422

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAPIKeyAuthentication:
    """Test API key authentication."""

    def test_no_api_key_required_by_default(self, monkeypatch):
        monkeypatch.delenv("TPLOG_API_KEY", raising=False)
        client = TestClient(create_app())

        response = client.post("/analyze", json={"events": []})
        assert response.status_code == 200

    def test_api_key_required_when_configured(self, client_with_api_key):
        response = client_with_api_key.post("/analyze", json={"events": []})

        assert response.status_code == 401
        assert "API key" in response.json()["detail"]

    def test_api_key_invalid(self, client_with_api_key):
        response = client_with_api_key.post(
            "/analyze",
            json={"events": []},
            headers={"X-API-Key": "wrong-key"},
        )
        assert response.status_code == 401

    def test_api_key_valid(self, client_with_api_key):
        response = client_with_api_key.post(
            "/analyze",
            json={"events": SAMPLE_EVENTS},
            headers={"X-API-Key": "test-secret-key"},
        )
        assert response.status_code == 200
        assert len(response.json()["sessions"]) == 1

    def test_env_var_enables_key(self, monkeypatch):
        monkeypatch.setenv("TPLOG_API_KEY", "from-env")
        client = TestClient(create_app())

        assert client.post("/analyze", json={"events": []}).status_code == 401

    def test_health_is_open(self, client_with_api_key):
        assert client_with_api_key.get("/health").status_code == 200


class TestPayloadSizeLimit:
    """Test payload size limit."""

    def test_oversized_payload_rejected(self):
        client = TestClient(create_app(require_api_key=False, max_payload_size=200))

        response = client.post("/analyze", json={"events": SAMPLE_EVENTS * 5})

        assert response.status_code == 413
        assert "too large" in response.json()["detail"]

    def test_small_payload_accepted(self):
        client = TestClient(create_app(require_api_key=False, max_payload_size=10_000))

        response = client.post("/analyze", json={"events": SAMPLE_EVENTS})
        assert response.status_code == 200
