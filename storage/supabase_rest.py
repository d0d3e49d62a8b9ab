"""
storage/supabase_rest.py

Supabase backend over plain REST (requests):
- SupabaseRecordStore  -> PostgREST  /rest/v1/<table>
- SupabaseSessionStore -> GoTrue     /auth/v1/...

Both share one requests.Session so the signed-in user's access token is
sent with table reads/writes (row-level security applies server-side).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests

from pipelines.schemas import Identity, Profile
from storage.auth import AuthError, ListenerMixin, SessionUnavailableError, validate_signup
from storage.records import Order, RecordStoreError

logger = logging.getLogger(__name__)


def _eq(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def _error_text(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or body
        )
    return str(body)


class SupabaseClient:
    """Holds the project URL, anon key and the current access token."""

    def __init__(self, url: str, anon_key: str, http: Optional[requests.Session] = None):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.http = http or requests.Session()
        self.access_token: Optional[str] = None

    def headers(self, **extra: str) -> dict[str, str]:
        h = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
            "Content-Type": "application/json",
        }
        h.update(extra)
        return h


class SupabaseRecordStore:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def _request(self, method: str, table: str, **kwargs: Any) -> list[dict]:
        url = f"{self.client.url}/rest/v1/{table}"
        try:
            response = self.client.http.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, table, exc)
            raise RecordStoreError(f"{method} {table}: {exc}") from exc

        if not response.ok:
            text = _error_text(response)
            logger.error("%s %s rejected (%d): %s", method, table, response.status_code, text)
            raise RecordStoreError(f"{method} {table}: {text}")

        if not response.content:
            return []
        try:
            body = response.json()
        except ValueError as exc:
            raise RecordStoreError(f"{method} {table}: malformed response") from exc
        return body if isinstance(body, list) else [body]

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
    ) -> list[dict]:
        params: dict[str, str] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = _eq(value)
        if order is not None:
            column, descending = order
            params["order"] = f"{column}.{'desc' if descending else 'asc'}"
        return self._request("GET", table, params=params, headers=self.client.headers())

    def insert(self, table: str, record: Mapping[str, Any]) -> dict:
        rows = self._request(
            "POST",
            table,
            json=dict(record),
            headers=self.client.headers(Prefer="return=representation"),
        )
        return rows[0] if rows else dict(record)

    def update(self, table: str, record: Mapping[str, Any], match: Mapping[str, Any]) -> list[dict]:
        if not match:
            raise RecordStoreError("update() requires a non-empty match")
        params = {column: _eq(value) for column, value in match.items()}
        return self._request(
            "PATCH",
            table,
            params=params,
            json=dict(record),
            headers=self.client.headers(Prefer="return=representation"),
        )


# GoTrue error strings -> stable codes used by the notice layer
_AUTH_CODES = (
    ("invalid login credentials", "wrong-password"),
    ("user already registered", "email-already-in-use"),
    ("password should be at least", "weak-password"),
    ("unable to validate email", "invalid-email"),
    ("invalid email", "invalid-email"),
)


def _auth_code(text: str) -> str:
    lowered = text.lower()
    for needle, code in _AUTH_CODES:
        if needle in lowered:
            return code
    return "auth-error"


class SupabaseSessionStore(ListenerMixin):
    def __init__(self, client: SupabaseClient, records: SupabaseRecordStore):
        super().__init__()
        self.client = client
        self.records = records

    def _auth_post(self, path: str, payload: dict, params: Optional[dict] = None) -> dict:
        url = f"{self.client.url}/auth/v1/{path}"
        try:
            response = self.client.http.post(url, json=payload, params=params, headers=self.client.headers())
        except requests.RequestException as exc:
            logger.error("Auth request %s failed: %s", path, exc)
            raise SessionUnavailableError(f"Authentication service unreachable: {exc}") from exc

        if not response.ok:
            text = _error_text(response)
            raise AuthError(_auth_code(text), text)
        try:
            return response.json() if response.content else {}
        except ValueError as exc:
            raise SessionUnavailableError("Malformed response from authentication service") from exc

    def _accept_session(self, body: dict, fallback_email: str) -> Identity:
        user = body.get("user") or body
        if not user.get("id"):
            raise AuthError("auth-error", "Authentication service returned no user")
        self.client.access_token = body.get("access_token")
        identity = Identity(id=user["id"], email=user.get("email") or fallback_email)
        self._emit(identity)
        return identity

    def sign_in(self, email: str, password: str) -> Identity:
        body = self._auth_post(
            "token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        return self._accept_session(body, email)

    def create(self, email: str, password: str, full_name: str, role: str) -> Identity:
        validate_signup(email, password, role)
        body = self._auth_post(
            "signup",
            {"email": email, "password": password, "data": {"full_name": full_name, "role": role}},
        )
        user = body.get("user") or body
        if body.get("access_token"):
            self.client.access_token = body["access_token"]
        try:
            self.records.insert(
                "profiles",
                {"id": user.get("id"), "email": email, "full_name": full_name, "role": role},
            )
        except RecordStoreError as exc:
            raise AuthError("profile-create-failed", f"Account created but profile was not saved: {exc}") from exc
        return self._accept_session(body, email)

    def get_profile(self, user_id: str) -> Optional[Profile]:
        try:
            rows = self.records.select("profiles", {"id": user_id})
        except RecordStoreError as exc:
            raise SessionUnavailableError(str(exc)) from exc
        if not rows:
            logger.info("No profile found for user %s", user_id)
            return None
        return Profile(**rows[0])

    def destroy_session(self) -> None:
        if self.client.access_token:
            try:
                self._auth_post("logout", {})
            except (AuthError, SessionUnavailableError) as exc:
                logger.warning("Remote sign-out failed, clearing local session anyway: %s", exc)
        self.client.access_token = None
        self._emit(None)
