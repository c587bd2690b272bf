from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

import requests

from reminder_app.utils.timezone import to_utc_aware
from .config import get_client_settings
from .storage import TokenStore

logger = logging.getLogger(__name__)


class ReminderAPIError(Exception):
    """A request to the reminders API failed (transport error or non-2xx response)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UnauthorizedError(ReminderAPIError):
    """The stored token is missing, invalid or expired; the user must log in again."""


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_utc_aware(value).isoformat()
    return value


class ReminderAPI:
    """Thin client over the reminders REST API.

    The bearer token comes from ``token_store`` on every request, so a login
    in one place is picked up by pollers and notification handlers sharing
    the same store.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        client_settings = get_client_settings()
        self.base_url = (base_url or client_settings.api_url).rstrip("/")
        self.token_store = token_store or TokenStore(client_settings.token_path)
        self.timeout = timeout or client_settings.request_timeout_seconds
        self.session = session or requests.Session()

    @property
    def has_token(self) -> bool:
        return bool(self.token_store.get())

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        token = self.token_store.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, json=json, headers=self._build_headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"[API] {method} {path} failed: {e!r}")
            raise ReminderAPIError(str(e)) from e

        if response.status_code >= 400:
            try:
                body = response.json()
                message = body.get("message") or body.get("detail") or f"HTTP {response.status_code}"
            except ValueError:
                message = f"HTTP {response.status_code}"
            logger.error(f"[API] {method} {path} -> {response.status_code}: {message}")
            error_cls = UnauthorizedError if response.status_code == 401 else ReminderAPIError
            raise error_cls(str(message), status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # --- Auth ---
    def signup(self, email: str, password: str, name: Optional[str] = None) -> Dict[str, Any]:
        data = self._request("POST", "/auth/signup", json={"email": email, "password": password, "name": name})
        self.token_store.save(data["access_token"])
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token_store.save(data["access_token"])
        return data

    def logout(self) -> None:
        self.token_store.clear()

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    def register_push_token(self, push_token: str) -> None:
        self._request("PUT", "/notifications/push-token", json={"push_token": push_token})

    # --- Reminders ---
    def list_reminders(self) -> List[Dict[str, Any]]:
        return list(self._request("GET", "/reminders") or [])

    def get_reminder(self, reminder_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/reminders/{reminder_id}")

    def create_reminder(
        self,
        title: str,
        due_date: datetime,
        description: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"title": title, "dueDate": _serialize(due_date), "status": "pending"}
        if description is not None:
            payload["description"] = description
        if priority is not None:
            payload["priority"] = priority
        return self._request("POST", "/reminders", json=payload)

    def update_reminder(self, reminder_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        payload = {key: _serialize(value) for key, value in changes.items()}
        return self._request("PATCH", f"/reminders/{reminder_id}", json=payload)

    def mark_completed(self, reminder_id: str) -> Dict[str, Any]:
        return self.update_reminder(reminder_id, {"status": "completed", "completed": True})

    def delete_reminder(self, reminder_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/reminders/{reminder_id}")
