"""HTTP client for the users API."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


class ApiUnavailable(Exception):
    """The API could not be reached at all."""


@dataclass
class ApiResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300 and bool(self.body.get("success", True))

    @property
    def message(self) -> str:
        return self.body.get("message") or f"Error {self.status_code}"

    @property
    def data(self) -> Any:
        return self.body.get("data")

    @property
    def errors(self) -> List[str]:
        return list(self.body.get("errors") or [])


class UsersApiClient:
    """Thin wrapper over ``httpx.Client``; any ``httpx.Client`` may be injected."""

    def __init__(self, base_url: str = "", http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> ApiResponse:
        try:
            response = self.http.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("API request failed", method=method, path=path, error=str(exc))
            raise ApiUnavailable(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}
        return ApiResponse(response.status_code, body)

    def health(self) -> ApiResponse:
        return self._request("GET", "/health")

    def list_users(self) -> ApiResponse:
        return self._request("GET", "/users")

    def create_user(self, name: str, email: str) -> ApiResponse:
        return self._request("POST", "/users", {"name": name, "email": email})

    def update_user(self, user_id: int, name: str, email: str) -> ApiResponse:
        return self._request("PUT", f"/users/{user_id}", {"name": name, "email": email})

    def delete_user(self, user_id: int) -> ApiResponse:
        return self._request("DELETE", f"/users/{user_id}")

    def close(self) -> None:
        if self._owns_http:
            self.http.close()
