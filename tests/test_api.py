"""
API tests for the auth, profile and dating routers.

Routes run against an in-memory profile store and the mock ranking
client via FastAPI dependency overrides.

Run with: pytest tests/test_api.py -v
"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from starlette.routing import Match, Route

from nomadmatch.api.deps import get_configured_ranking_client, get_profile_store
from nomadmatch.auth import COOKIE_NAME, create_session_token, verify_session_token
from nomadmatch.config import get_settings
from nomadmatch.main import app
from nomadmatch.middleware.metrics import PrometheusMiddleware
from nomadmatch.services.profile_store import InMemoryProfileStore, ProfileStoreError
from nomadmatch.services.ranking import MockRankingClient


COMPLETE = {
    "gender": "female",
    "age": 28,
    "city": "Lisbon",
    "orientation": "anyone",
    "interests": ["surf", "yoga"],
    "favorite_food": "Pastel de nata",
    "fun_fact": "Crossed the Atlantic by boat",
    "relationship_goals": "Serious",
    "occupation": "Designer",
    "education": "Master's",
    "hobbies": ["photography"],
    "favorite_movie": "Amelie",
}


@pytest.fixture
def store():
    return InMemoryProfileStore({
        "me": {"name": "Me"},
        "ana": {**COMPLETE, "name": "Ana", "interests": ["surf"]},
        "rui": {**COMPLETE, "name": "Rui", "gender": "male", "interests": ["chess"]},
    })


@pytest.fixture
def client(store):
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_configured_ranking_client] = lambda: MockRankingClient()

    test_client = TestClient(app)
    test_client.cookies.set(COOKIE_NAME, create_session_token("me"))
    yield test_client

    app.dependency_overrides.clear()


class TestAuth:
    """Tests for session login."""

    def test_token_round_trip(self):
        assert verify_session_token(create_session_token("u1")) == "u1"

    def test_bad_token_rejected(self):
        assert verify_session_token("not-a-token") is None

    def test_login_sets_session_cookie(self):
        client = TestClient(app)

        response = client.post(
            "/auth/login",
            json={"uid": "me", "password": get_settings().app_password},
        )

        assert response.status_code == 200
        assert client.get("/auth/check").json() == {"authenticated": True, "uid": "me"}

    def test_login_wrong_password(self):
        response = TestClient(app).post("/auth/login", json={"uid": "me", "password": "wrong"})
        assert response.status_code == 401

    def test_routes_require_session(self):
        assert TestClient(app).get("/dating/matches").status_code == 401

    def test_login_session_is_scoped_to_requested_uid(self, client):
        """The shared password picks no identity; the session carries the uid sent."""
        client.cookies.clear()

        response = client.post(
            "/auth/login",
            json={"uid": "ana", "password": get_settings().app_password},
        )

        assert response.status_code == 200
        assert client.get("/profile").json()["name"] == "Ana"

    def test_login_rejects_blank_uid(self):
        response = TestClient(app).post(
            "/auth/login",
            json={"uid": "", "password": get_settings().app_password},
        )
        assert response.status_code == 422


class TestProfileRoutes:
    """Tests for /profile."""

    def test_get_profile(self, client):
        response = client.get("/profile")

        assert response.status_code == 200
        assert response.json()["uid"] == "me"
        assert response.json()["enable_dating"] is False

    def test_get_creates_missing_profile(self, client, store):
        client.cookies.set(COOKIE_NAME, create_session_token("new-user"))

        response = client.get("/profile")

        assert response.status_code == 200
        assert response.json()["uid"] == "new-user"

    def test_put_updates_fields_and_extra(self, client):
        response = client.put("/profile", json={"city": "Porto", "favorite_song": "Fado"})

        assert response.status_code == 200
        body = response.json()
        assert body["city"] == "Porto"
        assert body["favorite_song"] == "Fado"

    def test_put_ignores_dating_toggle(self, client, store):
        client.put("/profile", json={"enable_dating": True})
        assert client.get("/profile").json()["enable_dating"] is False


class TestDatingRoutes:
    """Tests for /dating."""

    def test_enable_returns_missing_questions(self, client):
        response = client.put("/dating/enabled", json={"enabled": True})

        assert response.status_code == 200
        body = response.json()
        assert body["enabled"] is True
        assert body["missing_questions"][0]["field"] == "gender"
        assert len(body["missing_questions"]) == 12

    def test_disable(self, client):
        response = client.put("/dating/enabled", json={"enabled": False})

        assert response.json() == {"enabled": False, "missing_questions": []}

    def test_list_missing_questions(self, client):
        response = client.get("/dating/questions")

        assert response.status_code == 200
        fields = [q["field"] for q in response.json()]
        assert fields[:3] == ["gender", "age", "city"]
        assert response.json()[1]["parser"] == "integer"

    def test_wizard_then_matches(self, client):
        client.put("/dating/enabled", json={"enabled": True})
        answers = [
            "male", "31", "Lisbon", "anyone", "surf, books",
            "Bacalhau", "Sailed to Madeira", "Serious", "Engineer",
            "Bachelor's", "climbing", "Jaws",
        ]

        wizard = client.post("/dating/wizard", json={"answers": answers})
        assert wizard.status_code == 200
        assert wizard.json()["age"] == 31
        assert wizard.json()["interests"] == ["surf", "books"]

        matches = client.get("/dating/matches")
        assert matches.status_code == 200
        cards = matches.json()["matches"]
        assert [c["uid"] for c in cards] == ["ana", "rui"]
        assert cards[0]["name"] == "Ana"
        assert cards[0]["reason"] == "Shared interests: surf"
        assert cards[0]["profile"]["city"] == "Lisbon"

    def test_wizard_with_too_few_answers(self, client):
        response = client.post("/dating/wizard", json={"answers": ["male"]})

        assert response.status_code == 422
        assert response.json()["remaining"][0] == "age"

    def test_matches_empty_when_dating_off(self, client):
        response = client.get("/dating/matches")

        assert response.status_code == 200
        assert response.json() == {"matches": []}

    def test_store_failure_is_reported(self, client, store):
        store.update = AsyncMock(side_effect=ProfileStoreError("write failed"))

        response = client.put("/dating/enabled", json={"enabled": True})

        assert response.status_code == 503

    def test_enable_creates_profile_on_first_use(self, client, store):
        client.cookies.set(COOKIE_NAME, create_session_token("newcomer"))

        response = client.put("/dating/enabled", json={"enabled": True})

        assert response.status_code == 200
        assert len(response.json()["missing_questions"]) == 12

    def test_questions_create_profile_on_first_use(self, client):
        client.cookies.set(COOKIE_NAME, create_session_token("newcomer"))

        response = client.get("/dating/questions")

        assert response.status_code == 200
        assert len(response.json()) == 12
        assert client.get("/profile").json()["uid"] == "newcomer"

    def test_unknown_user_is_404(self, client):
        client.cookies.set(COOKIE_NAME, create_session_token("ghost"))
        assert client.get("/dating/matches").status_code == 404


class TestHealth:
    """Tests for service endpoints."""

    def test_health(self):
        assert TestClient(app).get("/health").json() == {"status": "healthy"}

    def test_metrics_endpoint(self):
        response = TestClient(app).get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    def test_routed_request_is_counted(self):
        client = TestClient(app)

        assert client.get("/auth/check").status_code == 401

        lines = [
            line for line in client.get("/metrics").text.splitlines()
            if line.startswith("http_requests_total{")
            and 'status="401"' in line
            and "/check" in line
        ]
        assert lines

    def test_endpoint_label_skips_entries_without_path(self):
        class IncludedRouter:
            def matches(self, scope):
                return Match.FULL, {}

        request = MagicMock()
        request.app.routes = [IncludedRouter(), Route("/health", endpoint=lambda r: None)]
        request.scope = {"type": "http", "path": "/health", "root_path": "", "method": "GET"}

        assert PrometheusMiddleware(app)._get_endpoint(request) == "/health"
