"""HTTP wrapper around ``requests.Session`` that unwraps the response envelope."""

from __future__ import annotations

from typing import Any, Optional

import requests

from ..logging_config import get_logger

logger = get_logger("client.api")

DEFAULT_TIMEOUT = 10


class ApiRequestError(Exception):
    """Raised for transport failures and ``success: false`` responses."""

    def __init__(self, message: str, status: Optional[int] = None, errors: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or []


class ApiClient:
    """Bearer-token client; ``login``, ``register`` and ``refresh`` keep tokens current."""

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        *,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.refresh_token: Optional[str] = None
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        files: Any = None,
        data: Any = None,
        raw: bool = False,
    ) -> Any:
        """Send a request and return the envelope's ``data`` (or the response when ``raw``)."""

        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self.session.request(
                method.upper(),
                self._url(path),
                headers=headers,
                json=json,
                params=params,
                files=files,
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Request failed", extra={"method": method, "path": path})
            raise ApiRequestError(f"Connection failed: {exc}") from exc

        if raw and response.ok:
            return response
        try:
            body = response.json()
        except ValueError:
            body = None
        if not response.ok or not isinstance(body, dict) or body.get("success") is False:
            message = (body or {}).get("message") if isinstance(body, dict) else None
            raise ApiRequestError(
                message or f"Request failed with status {response.status_code}",
                response.status_code,
                (body or {}).get("errors") if isinstance(body, dict) else None,
            )
        return body.get("data")

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    def _store_tokens(self, data: dict[str, Any]) -> dict[str, Any]:
        self.token = data.get("accessToken", self.token)
        self.refresh_token = data.get("refreshToken", self.refresh_token)
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self._store_tokens(self.post("/auth/login", json={"email": email, "password": password}))

    def register(
        self, email: str, password: str, profile: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        payload = {"email": email, "password": password, "profile": profile or {}}
        return self._store_tokens(self.post("/auth/register", json=payload))

    def refresh(self) -> dict[str, Any]:
        if not self.refresh_token:
            raise ApiRequestError("No refresh token available", 401)
        return self._store_tokens(
            self.post("/auth/refresh", json={"refreshToken": self.refresh_token})
        )

    def logout(self) -> None:
        try:
            self.post("/auth/logout", json={"refreshToken": self.refresh_token})
        finally:
            self.token = None
            self.refresh_token = None
