"""
Shared pytest fixtures for the blog API test suite.

The environment is configured before any application import so the app binds
to a throwaway SQLite database and a test-only JWT secret.
"""

import os
import tempfile

import pytest

_test_dir = tempfile.mkdtemp(prefix="blog_api_test_")
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_test_dir, 'test.db')}"
os.environ["LOG_FILE"] = os.path.join(_test_dir, "test.log")

from fastapi.testclient import TestClient  # noqa: E402

from blog_api.database import engine  # noqa: E402
from blog_api.main import app  # noqa: E402
from blog_api.models import Base  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """HTTP client talking to the app in-process; runs the startup hook."""
    with TestClient(app) as test_client:
        yield test_client


def register(client, username, email, password="pw123"):
    """Sign a user up and log them in; returns token, id and auth headers."""
    response = client.post(
        "/api/auth/signup",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text

    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return {
        "token": body["token"],
        "id": body["user"]["id"],
        "username": body["user"]["username"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def alice(client):
    return register(client, "alice", "alice@x.com")


@pytest.fixture
def bob(client):
    return register(client, "bob", "bob@x.com", password="hunter2")


@pytest.fixture
def make_post(client):
    """Create a post as the given user and return its JSON."""

    def _make_post(user, **fields):
        payload = {"title": "Hi", "content": "World", "tags": ["intro"], "published": True}
        payload.update(fields)
        response = client.post("/api/post", json=payload, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _make_post
