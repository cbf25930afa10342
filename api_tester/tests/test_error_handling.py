"""
Tests for authentication and error response format consistency.

Every error body has the shape {"detail": str, "error_code": str}.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from api_tester import config
from api_tester.main import app
from api_tester.database import Base, get_db


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_error_handling.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="module")
def client():
    """Create test client with test database."""
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


def make_token(payload: dict, secret: str | None = None) -> str:
    return jwt.encode(payload, secret or config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


PROTECTED_ENDPOINTS = [
    ("get", "/api/history"),
    ("get", "/api/history/abc"),
    ("get", "/api/history/abc/snippet"),
    ("delete", "/api/history/abc"),
    ("delete", "/api/history"),
    ("get", "/api/stats"),
]


class TestAuthentication:
    """Missing or invalid identity is rejected before the core runs."""

    @pytest.mark.parametrize("method, path", PROTECTED_ENDPOINTS)
    def test_missing_token(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json() == {"detail": "Missing bearer token", "error_code": "UNAUTHORIZED"}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_wrong_secret(self, client):
        token = make_token({"id": "user-1"}, secret="some-other-secret-of-enough-length")
        response = client.get("/api/stats", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_garbage_token(self, client):
        response = client.get("/api/stats", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    def test_expired_token(self, client):
        expired = datetime.now(timezone.utc) - timedelta(hours=1)
        token = make_token({"id": "user-1", "exp": expired})
        response = client.get("/api/stats", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_token_without_identity(self, client):
        token = make_token({"email": "ada@example.com"})
        response = client.get("/api/stats", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_sub_claim_is_accepted(self, client):
        token = make_token({"sub": "user-1"})
        response = client.get("/api/stats", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200

    def test_basic_scheme_is_rejected(self, client):
        response = client.get("/api/stats", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status_code == 401


class TestErrorResponseFormat:

    def auth(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token({'id': 'user-1'})}"}

    def test_404_error_format_history_not_found(self, client):
        response = client.get("/api/history/99999", headers=self.auth())

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "RESOURCE_NOT_FOUND"
        assert "99999" in data["detail"]

    def test_422_validation_error_format(self, client):
        response = client.post("/api/request", json={}, headers=self.auth())

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert "url" in data["detail"]

    def test_422_invalid_url_format(self, client):
        response = client.post(
            "/api/request", json={"url": "not a url", "method": "POST"}, headers=self.auth()
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_422_invalid_snippet_language(self, client):
        response = client.get("/api/history/abc/snippet?language=python", headers=self.auth())
        assert response.status_code == 422


class TestPublicEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "API Tester"

    def test_health(self, client):
        response = client.get("/health")
        assert response.json() == {"status": "healthy"}
