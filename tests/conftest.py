"""
Pytest configuration and core fixtures.

Every test gets its own SQLite file under ``tmp_path``; the shared
``settings`` object is pointed at it so the stores, services and the
authentication dependency all open the same database.
"""

from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient

from helprequest_api.app.core.config import settings
from helprequest_api.app.core.db import get_connection, init_db
from helprequest_api.app.core.security import create_access_token

SUPER_ADMIN_EMAIL = "root@example.com"
ADMIN_EMAIL = "staff@example.com"
USER_EMAIL = "student@example.com"
PASSWORD = "correct-horse"


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def sample_params(**overrides) -> Dict[str, str]:
    params = {
        "requesterEmail": "cgaucho@ucsb.edu",
        "teamId": "s22-5pm-3",
        "tableOrBreakoutRoom": "7",
        "requestTime": "2022-04-20T17:35:00",
        "explanation": "Need help with Swagger-ui",
        "solved": "false",
    }
    params.update(overrides)
    return params


@pytest.fixture
def database(tmp_path, monkeypatch) -> str:
    db_path = str(tmp_path / "helprequests-test.db")
    monkeypatch.setattr(settings, "database_url", db_path)
    monkeypatch.setattr(settings, "admin_emails", [ADMIN_EMAIL])
    monkeypatch.setattr(settings, "bot_tokens", "")
    monkeypatch.setattr(settings, "super_admin_static_token", "")
    init_db()
    return db_path


@pytest.fixture
def connect(database):
    return get_connection


@pytest.fixture
def client(database) -> Iterator[TestClient]:
    from helprequest_api.app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def users(client) -> Dict[str, str]:
    """Register a super admin, an admin and a plain user; return their tokens."""
    tokens = {}
    for name, email in (("super_admin", SUPER_ADMIN_EMAIL), ("admin", ADMIN_EMAIL), ("user", USER_EMAIL)):
        response = client.post("/api/users", json={"email": email, "password": PASSWORD})
        assert response.status_code == 201, response.text
        tokens[name] = create_access_token({"sub": email})
    return tokens


@pytest.fixture
def admin_headers(users) -> Dict[str, str]:
    return auth_headers(users["admin"])


@pytest.fixture
def user_headers(users) -> Dict[str, str]:
    return auth_headers(users["user"])


@pytest.fixture
def super_admin_headers(users) -> Dict[str, str]:
    return auth_headers(users["super_admin"])
