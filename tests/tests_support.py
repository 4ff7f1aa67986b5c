"""Helpers shared by the API test modules."""

from __future__ import annotations

from typing import Any


def register(client, email: str, password: str, **profile: Any) -> dict[str, Any]:
    """Register through the API and return the token payload."""

    response = client.post(
        "/api/auth/register", json={"email": email, "password": password, "profile": profile}
    )
    assert response.status_code == 201, response.get_json()
    return response.get_json()["data"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
