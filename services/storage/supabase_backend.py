"""Supabase (PostgREST + GoTrue) backend for the CV Portal."""

import logging
from typing import Any, Dict, List, Optional

import requests

from config.models import AdminSession
from config.settings import SupabaseConfig, get_supabase_config
from .base import DataStore
from .errors import StoreError

logger = logging.getLogger(__name__)


class SupabaseBackend(DataStore):
    """Talks to the hosted project over its REST and auth endpoints."""

    def __init__(self, config: Optional[SupabaseConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or get_supabase_config()
        if not self.config.url or not self.config.anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")
        self.base_url = self.config.url.strip().rstrip("/")
        self.http = session or requests.Session()
        logger.info(f"SupabaseBackend initialized for {self.base_url}")

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------
    def _headers(self, bearer: Optional[str] = None) -> Dict[str, str]:
        key = self.config.anon_key or ""
        return {
            "apikey": key,
            "Authorization": f"Bearer {bearer or key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.http.request(method, url, timeout=self.config.timeout_seconds, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error calling {method} {url}: {e}")
            raise StoreError(f"Network error: {e}", code="network") from e

    @staticmethod
    def _raise_for_error(response: requests.Response) -> None:
        """Translate a PostgREST error body into a StoreError."""
        if response.status_code < 400:
            return
        body: Dict[str, Any] = {}
        try:
            body = response.json() or {}
        except ValueError:
            pass
        raise StoreError(
            body.get("message") or response.text or f"HTTP {response.status_code}",
            code=body.get("code"),
            status=response.status_code,
            details=body.get("details"),
        )

    @staticmethod
    def _json(response: requests.Response, default: Any) -> Any:
        """Decode a response body; an empty body gives `default`."""
        if not response.text:
            return default
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Non-JSON response (HTTP {response.status_code}): {response.text[:200]!r}")
            raise StoreError(
                f"Invalid JSON response (HTTP {response.status_code})",
                code="invalid_response",
                status=response.status_code,
            ) from e

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        headers = {**self._headers(), "Prefer": "return=representation"}
        response = self._request("POST", f"/rest/v1/{table}", headers=headers, json=row)
        self._raise_for_error(response)

        rows = self._json(response, [])
        if isinstance(rows, list):
            return rows[0] if rows else dict(row)
        return rows

    def select(
        self, table: str, order_by: Optional[str] = None, descending: bool = True
    ) -> List[Dict[str, Any]]:
        params = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"

        response = self._request("GET", f"/rest/v1/{table}", headers=self._headers(), params=params)
        self._raise_for_error(response)
        return self._json(response, [])

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def get_session(self, access_token: Optional[str]) -> Optional[AdminSession]:
        if not access_token:
            return None

        response = self._request("GET", "/auth/v1/user", headers=self._headers(bearer=access_token))
        if response.status_code in (401, 403):
            logger.info("Access token rejected by auth endpoint")
            return None
        self._raise_for_error(response)

        user = self._json(response, None)
        if not isinstance(user, dict) or not user.get("id"):
            return None
        return AdminSession(user_id=str(user["id"]), email=user.get("email"), access_token=access_token)

    def is_admin(self, user_id: str) -> bool:
        try:
            response = self._request(
                "GET",
                f"/rest/v1/{self.config.admin_table}",
                headers=self._headers(),
                params={"select": "is_admin", "id": f"eq.{user_id}"},
            )
            self._raise_for_error(response)
            rows = self._json(response, [])
        except StoreError as e:
            logger.error(f"Admin lookup failed for user {user_id}: {e}")
            return False

        return bool(isinstance(rows, list) and rows and rows[0].get("is_admin"))
