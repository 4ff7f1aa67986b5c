from __future__ import annotations

import pytest

from tests_support import bearer, register

STRONG = "Str0ngPass"


def test_register_returns_user_and_tokens(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": STRONG, "profile": {"firstName": "Ada"}},
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "new@example.com"
    assert body["data"]["user"]["profile"]["firstName"] == "Ada"
    assert body["data"]["user"]["role"] is None
    assert body["data"]["accessToken"]
    assert body["data"]["refreshToken"]
    assert "refreshToken=" in response.headers.get("Set-Cookie", "")


def test_register_rejects_duplicate_email(client):
    register(client, "dup@example.com", STRONG)

    response = client.post(
        "/api/auth/register", json={"email": "dup@example.com", "password": STRONG}
    )

    assert response.status_code == 409
    assert response.get_json()["message"] == "Email already registered"


@pytest.mark.parametrize("password", ["short1A", "alllowercase1", "NoDigitsHere"])
def test_register_enforces_password_rules(client, password):
    response = client.post(
        "/api/auth/register", json={"email": "weak@example.com", "password": password}
    )

    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Validation failed"
    assert body["errors"][0]["field"] == "password"


def test_register_validates_email(client):
    response = client.post("/api/auth/register", json={"email": "nope", "password": STRONG})

    assert response.status_code == 400
    assert {"field": "email", "message": "Please provide a valid email"} in response.get_json()[
        "errors"
    ]


def test_login_and_me(client):
    register(client, "me@example.com", STRONG)

    response = client.post("/api/auth/login", json={"email": "me@example.com", "password": STRONG})
    assert response.status_code == 200
    token = response.get_json()["data"]["accessToken"]

    me = client.get("/api/auth/me", headers=bearer(token))
    assert me.status_code == 200
    assert me.get_json()["data"]["email"] == "me@example.com"
    assert me.get_json()["data"]["lastLogin"] is not None


def test_login_with_wrong_password(client):
    register(client, "me@example.com", STRONG)

    response = client.post(
        "/api/auth/login", json={"email": "me@example.com", "password": "Wrong1234"}
    )

    assert response.status_code == 401
    assert response.get_json() == {
        "success": False,
        "message": "Invalid email or password",
        "errors": [],
    }


def test_protected_route_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    bad = client.get("/api/auth/me", headers=bearer("not-a-jwt"))
    assert bad.status_code == 401
    assert bad.get_json()["message"] == "Invalid or expired token"


def test_refresh_and_logout_revokes_refresh_token(client):
    tokens = register(client, "r@example.com", STRONG)
    headers = bearer(tokens["accessToken"])

    refreshed = client.post("/api/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert refreshed.status_code == 200
    assert refreshed.get_json()["data"]["accessToken"]

    logout = client.post(
        "/api/auth/logout", json={"refreshToken": tokens["refreshToken"]}, headers=headers
    )
    assert logout.status_code == 200

    client.delete_cookie("refreshToken")
    again = client.post("/api/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert again.status_code == 401


def test_change_password_invalidates_old_login(client):
    tokens = register(client, "pw@example.com", STRONG)
    headers = bearer(tokens["accessToken"])

    wrong = client.put(
        "/api/users/change-password",
        json={"currentPassword": "Wrong1234", "newPassword": "N3wPassword"},
        headers=headers,
    )
    assert wrong.status_code == 400

    changed = client.put(
        "/api/users/change-password",
        json={"currentPassword": STRONG, "newPassword": "N3wPassword"},
        headers=headers,
    )
    assert changed.status_code == 200
    new_token = changed.get_json()["data"]["accessToken"]
    assert client.get(
        "/api/auth/me", headers=bearer(new_token)
    ).status_code == 200

    old_login = client.post("/api/auth/login", json={"email": "pw@example.com", "password": STRONG})
    assert old_login.status_code == 401


def test_role_can_only_be_chosen_once(client, auth_headers):
    # api_user already has the individual role
    response = client.put("/api/users/profile", json={"role": "business"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Role has already been selected"

    tokens = register(client, "fresh@example.com", STRONG)
    headers = bearer(tokens["accessToken"])
    chosen = client.put(
        "/api/users/profile",
        json={"role": "student", "profile": {"firstName": "Sam"}},
        headers=headers,
    )
    assert chosen.status_code == 200
    assert chosen.get_json()["data"]["role"] == "student"
    assert chosen.get_json()["data"]["fullName"] == "Sam"


def test_preferences_update(client, auth_headers):
    response = client.put(
        "/api/users/preferences",
        json={"notifications": False, "theme": "light"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.get_json()["data"]["preferences"] == {
        "notifications": False,
        "weeklyReport": True,
        "theme": "light",
    }

    invalid = client.put("/api/users/preferences", json={"theme": "neon"}, headers=auth_headers)
    assert invalid.status_code == 400


def test_delete_account_requires_password(client, app_ctx, api_user, auth_headers):
    missing = client.delete("/api/users/account", json={}, headers=auth_headers)
    assert missing.status_code == 400

    deleted = client.delete(
        "/api/users/account", json={"password": "Passw0rd!"}, headers=auth_headers
    )
    assert deleted.status_code == 200
    assert app_ctx.user_repo.get_by_id(api_user.id) is None
    assert client.get("/api/auth/me", headers=auth_headers).status_code == 401
