"""HTTP tests for users, /api/currentUser and the audit log."""

import pytest

from tests.conftest import ADMIN_EMAIL, PASSWORD, SUPER_ADMIN_EMAIL, USER_EMAIL, auth_headers, sample_params

pytestmark = pytest.mark.integration


class TestRegistration:

    def test_first_user_is_super_admin_then_roles_follow_admin_emails(self, client):
        roles = []
        for email in ("first@example.com", ADMIN_EMAIL, "someone@example.com"):
            response = client.post("/api/users", json={"email": email, "password": PASSWORD, "full_name": "X"})
            assert response.status_code == 201
            roles.append(response.json()["role_id"])

        assert roles == [1, 2, 3]

    def test_duplicate_email_is_conflict(self, client, users):
        response = client.post("/api/users", json={"email": USER_EMAIL.upper(), "password": PASSWORD})

        assert response.status_code == 409
        assert response.json()["type"] == "ConflictException"

    def test_password_is_never_returned(self, client):
        response = client.post("/api/users", json={"email": "a@example.com", "password": PASSWORD})

        assert "password" not in response.json()


class TestLogin:

    def test_login_returns_usable_token(self, client, users):
        response = client.post("/api/users/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})

        assert response.status_code == 200
        token = response.json()["access_token"]
        assert response.json()["token_type"] == "bearer"
        created = client.post("/api/helprequests/post", params=sample_params(), headers=auth_headers(token))
        assert created.status_code == 200

    def test_wrong_password_is_unauthorized(self, client, users):
        response = client.post("/api/users/login", json={"email": ADMIN_EMAIL, "password": "nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


class TestCurrentUser:

    def test_plain_user_has_only_role_user(self, client, user_headers):
        response = client.get("/api/currentUser", headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == USER_EMAIL
        assert body["roles"] == [{"authority": "ROLE_USER"}]

    def test_admin_has_both_authorities(self, client, admin_headers):
        roles = client.get("/api/currentUser", headers=admin_headers).json()["roles"]

        assert {r["authority"] for r in roles} == {"ROLE_ADMIN", "ROLE_USER"}

    def test_anonymous_is_unauthorized(self, client):
        assert client.get("/api/currentUser").status_code == 401


class TestUserListing:

    def test_admin_lists_users(self, client, admin_headers):
        response = client.get("/api/users", headers=admin_headers)

        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == [SUPER_ADMIN_EMAIL, ADMIN_EMAIL, USER_EMAIL]

    def test_plain_user_cannot_list_users(self, client, user_headers):
        assert client.get("/api/users", headers=user_headers).status_code == 403


class TestAuditLog:

    def test_super_admin_sees_help_request_changes(self, client, admin_headers, super_admin_headers):
        created = client.post("/api/helprequests/post", params=sample_params(), headers=admin_headers).json()
        client.delete("/api/helprequests", params={"id": created["id"]}, headers=admin_headers)

        response = client.get(
            "/api/audit/logs",
            params={"object_type": "helprequest"},
            headers=super_admin_headers,
        )

        assert response.status_code == 200
        logs = response.json()
        assert sorted(log["action"] for log in logs) == ["create", "delete"]
        assert all(log["object_id"] == created["id"] for log in logs)

    def test_admin_cannot_read_audit_log(self, client, admin_headers):
        assert client.get("/api/audit/logs", headers=admin_headers).status_code == 403
