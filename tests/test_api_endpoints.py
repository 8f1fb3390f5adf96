"""Integration tests for API endpoints.

These tests go through the real auth flow: cookies issued by login are
carried by the test client into later requests.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from teamstandup.models.standup import StandupStatus, utc_today

API = "/api/v1"
PASSWORD = "password123"  # seeded in conftest


def _login(client: TestClient, email: str, password: str = PASSWORD):
    client.cookies.clear()
    return client.post(f"{API}/auth/login", json={"email": email, "password": password})


def _standup_body(**overrides):
    body = {"yesterday": "Fixed the flaky test", "today": "Review the **migration**"}
    body.update(overrides)
    return body


class TestAuthEndpoints:

    def test_register_sets_cookies(self, test_client):
        response = test_client.post(
            f"{API}/auth/register",
            json={
                "email": "New.Member@Example.com",
                "password": "s3cret-pass",
                "name": "New Member",
                "timezone": "Pacific/Auckland",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == 201
        assert body["message"] == "User registered successfully"
        assert body["data"]["email"] == "new.member@example.com"
        assert body["data"]["timezone"] == "Pacific/Auckland"
        assert "passwordHash" not in body["data"]
        assert "accessToken" in response.cookies
        assert "refreshToken" in response.cookies

        me = test_client.get(f"{API}/auth/me")
        assert me.status_code == 200
        assert me.json()["data"]["name"] == "New Member"

    def test_register_duplicate_email(self, test_client):
        response = test_client.post(
            f"{API}/auth/register",
            json={"email": "TEST@example.com", "password": "s3cret-pass", "name": "Dupe"},
        )
        assert response.status_code == 409
        assert response.json() == {
            "status": 409,
            "message": "User already exists",
            "error": {"code": "CONFLICT"},
        }

    def test_register_validation(self, test_client):
        response = test_client.post(
            f"{API}/auth/register",
            json={"email": "not-an-email", "password": "short", "name": "X"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["error"]["code"] == "VALIDATION_ERROR"
        fields = {d["field"] for d in body["error"]["details"]}
        assert {"email", "password", "name"} <= fields

    def test_login_failures_look_identical(self, test_client, user_repository, other_user_id):
        user_repository.soft_delete(other_user_id)

        responses = [
            _login(test_client, "nobody@example.com"),
            _login(test_client, "test@example.com", "wrong-password"),
            _login(test_client, "other@example.com"),
        ]
        assert [r.status_code for r in responses] == [401, 401, 401]
        assert responses[0].json() == responses[1].json() == responses[2].json()
        assert responses[0].json()["message"] == "Invalid credentials"

    def test_me_requires_token(self, test_client):
        response = test_client.get(f"{API}/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Access token is required"
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_me_rejects_bad_bearer(self, test_client):
        response = test_client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_me_accepts_bearer_header(self, logged_in_client, test_user_id):
        token = logged_in_client.cookies.get("accessToken")
        logged_in_client.cookies.clear()

        response = logged_in_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == test_user_id
        assert "profileImage" in data
        assert "createdAt" in data

    def test_refresh_rotates_tokens(self, logged_in_client):
        old_refresh = logged_in_client.cookies.get("refreshToken")

        response = logged_in_client.post(f"{API}/auth/refresh-token")
        assert response.status_code == 204
        new_refresh = response.cookies.get("refreshToken")
        assert new_refresh and new_refresh != old_refresh

        # The consumed token is dead
        logged_in_client.cookies.clear()
        replay = logged_in_client.post(
            f"{API}/auth/refresh-token",
            headers={"Cookie": f"refreshToken={old_refresh}"},
        )
        assert replay.status_code == 401
        assert replay.json()["message"] == "Invalid refresh token"

    def test_refresh_without_cookie(self, test_client):
        response = test_client.post(f"{API}/auth/refresh-token")
        assert response.status_code == 401

    def test_logout_clears_session(self, logged_in_client):
        refresh = logged_in_client.cookies.get("refreshToken")

        response = logged_in_client.post(f"{API}/auth/logout")
        assert response.status_code == 204
        assert logged_in_client.get(f"{API}/auth/me").status_code == 401

        logged_in_client.cookies.clear()
        replay = logged_in_client.post(
            f"{API}/auth/refresh-token",
            headers={"Cookie": f"refreshToken={refresh}"},
        )
        assert replay.status_code == 401

    def test_logout_all(self, logged_in_client, refresh_token_repository, test_user_id):
        assert refresh_token_repository.find_user_tokens(test_user_id)

        response = logged_in_client.post(f"{API}/auth/logout-all")
        assert response.status_code == 204
        assert refresh_token_repository.find_user_tokens(test_user_id) == []


class TestStandupEndpoints:

    def test_requires_auth(self, test_client):
        assert test_client.get(f"{API}/standups").status_code == 401
        assert test_client.post(f"{API}/standups", json=_standup_body()).status_code == 401

    def test_create_standup(self, logged_in_client, test_user_id):
        response = logged_in_client.post(f"{API}/standups", json=_standup_body())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Standup created successfully"
        data = body["data"]
        assert data["userId"] == test_user_id
        assert data["date"] == utc_today().isoformat()
        assert data["status"] == "draft"
        assert data["blockers"] == "None"

    def test_create_twice_same_day_conflicts(self, logged_in_client):
        assert logged_in_client.post(f"{API}/standups", json=_standup_body()).status_code == 201

        response = logged_in_client.post(f"{API}/standups", json=_standup_body(today="Second try"))
        assert response.status_code == 409
        assert response.json()["message"] == "Standup already exists for this date"

    def test_create_backdated(self, logged_in_client):
        day = utc_today() - timedelta(days=2)
        response = logged_in_client.post(f"{API}/standups", json=_standup_body(date=day.isoformat()))
        assert response.status_code == 201
        assert response.json()["data"]["date"] == day.isoformat()

    @pytest.mark.parametrize("overrides", [
        {"yesterday": ""},
        {"today": "x" * 1001},
        {"blockers": "[unbalanced"},
        {"date": (utc_today() + timedelta(days=1)).isoformat()},
        {"date": (utc_today() - timedelta(days=8)).isoformat()},
        {"status": "archived"},
    ])
    def test_create_validation(self, logged_in_client, overrides):
        response = logged_in_client.post(f"{API}/standups", json=_standup_body(**overrides))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_markdown_error_message(self, logged_in_client):
        response = logged_in_client.post(f"{API}/standups", json=_standup_body(yesterday="see [link"))
        details = response.json()["error"]["details"]
        assert {"field": "yesterday", "message": "Yesterday contains invalid markdown syntax"} in details

    def test_team_view_lists_everyone_today(self, logged_in_client, standup_repository, other_user_id):
        logged_in_client.post(f"{API}/standups", json=_standup_body())
        standup_repository.create_or_update_draft(other_user_id, utc_today(), _standup_body())
        standup_repository.create_or_update_draft(other_user_id, utc_today() - timedelta(days=1), _standup_body())

        response = logged_in_client.get(f"{API}/standups")
        assert response.status_code == 200
        page = response.json()["data"]
        assert page["pagination"]["total"] == 2
        assert {s["user"]["name"] for s in page["data"]} == {"Test User", "Another User"}

    def test_history_view_paginates(self, logged_in_client, standup_repository, other_user_id):
        for offset in range(3):
            standup_repository.create_or_update_draft(
                other_user_id, utc_today() - timedelta(days=offset), _standup_body()
            )

        response = logged_in_client.get(f"{API}/standups", params={"userId": other_user_id, "limit": 2})
        assert response.status_code == 200
        pagination = response.json()["data"]["pagination"]
        assert pagination == {"page": 1, "limit": 2, "total": 3, "totalPages": 2, "hasMore": True}

        dates = [s["date"] for s in response.json()["data"]["data"]]
        assert dates == sorted(dates, reverse=True)

    def test_list_filters(self, logged_in_client, standup_repository, other_user_id):
        yesterday = utc_today() - timedelta(days=1)
        standup_repository.create_or_update_draft(
            other_user_id, yesterday, _standup_body(status=StandupStatus.SUBMITTED)
        )

        response = logged_in_client.get(
            f"{API}/standups",
            params={"date": yesterday.isoformat(), "status": "submitted"},
        )
        assert response.json()["data"]["pagination"]["total"] == 1

        response = logged_in_client.get(
            f"{API}/standups",
            params={"dateFrom": yesterday.isoformat(), "dateTo": yesterday.isoformat(), "status": "draft"},
        )
        assert response.json()["data"]["pagination"]["total"] == 0

    def test_list_rejects_bad_paging(self, logged_in_client):
        assert logged_in_client.get(f"{API}/standups", params={"limit": 500}).status_code == 400
        assert logged_in_client.get(f"{API}/standups", params={"page": 0}).status_code == 400
        assert logged_in_client.get(f"{API}/standups", params={"sort": "name"}).status_code == 400

    def test_get_standup(self, logged_in_client, standup_repository, other_user_id):
        created = standup_repository.create_or_update_draft(other_user_id, utc_today(), _standup_body())

        response = logged_in_client.get(f"{API}/standups/{created.id}")
        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == other_user_id

        missing = logged_in_client.get(f"{API}/standups/does-not-exist")
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "NOT_FOUND"

    def test_update_own_standup(self, logged_in_client):
        created = logged_in_client.post(f"{API}/standups", json=_standup_body()).json()["data"]

        response = logged_in_client.patch(
            f"{API}/standups/{created['id']}",
            json={"status": "submitted", "blockers": "Waiting on review"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "submitted"
        assert data["blockers"] == "Waiting on review"
        assert data["today"] == created["today"]

    def test_update_someone_elses_standup_is_not_found(self, logged_in_client, standup_repository, other_user_id):
        theirs = standup_repository.create_or_update_draft(other_user_id, utc_today(), _standup_body())

        response = logged_in_client.patch(f"{API}/standups/{theirs.id}", json={"today": "Hijacked"})
        assert response.status_code == 404
        assert standup_repository.get(theirs.id).today == "Review the **migration**"


class TestUserEndpoints:

    def test_list_active_users(self, logged_in_client, user_repository):
        user_repository.create(email="gone@example.com", password_hash="x", name="Gone")
        user_repository.soft_delete(user_repository.get_by_email("gone@example.com").id)

        response = logged_in_client.get(f"{API}/users")
        assert response.status_code == 200
        assert [u["name"] for u in response.json()["data"]] == ["Another User", "Test User"]

    def test_update_profile(self, logged_in_client):
        response = logged_in_client.patch(
            f"{API}/users/me",
            json={"name": "Renamed", "profileImage": "https://example.com/me.png"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Renamed"
        assert data["profileImage"] == "https://example.com/me.png"

    def test_update_profile_needs_fields(self, logged_in_client):
        response = logged_in_client.patch(f"{API}/users/me", json={})
        assert response.status_code == 400

    def test_deactivate_account(self, logged_in_client):
        response = logged_in_client.delete(f"{API}/users/me")
        assert response.status_code == 204

        assert _login(logged_in_client, "test@example.com").status_code == 401


def test_health(test_client):
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_unknown_route_uses_error_body(test_client):
    response = test_client.get(f"{API}/nope")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
