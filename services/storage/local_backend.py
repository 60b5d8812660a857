import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.models import AdminSession
from .base import DataStore
from .errors import StoreError, UNIQUE_VIOLATION

logger = logging.getLogger(__name__)


class LocalStoreBackend(DataStore):
    """Filesystem-based replacement for the hosted backend: one JSON file per table."""

    SESSIONS_FILE = "sessions.json"

    def __init__(
        self,
        base_dir: str = "local_store",
        unique_fields: Optional[Dict[str, List[str]]] = None,
        admin_table: str = "admin_users",
    ):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.unique_fields = unique_fields if unique_fields is not None else {"cvs": ["applicant_name"]}
        self.admin_table = admin_table
        self._lock = threading.Lock()

    def _path(self, table: str) -> Path:
        return self.base_dir / f"{table}.json"

    def _read(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read {path.name}: {e}", code="local_io") from e

    def _write(self, path: Path, data: Any):
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
        except OSError as e:
            raise StoreError(f"Cannot write {path.name}: {e}", code="local_io") from e

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self._read(self._path(table)) or []

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            rows = self._rows(table)

            for field in self.unique_fields.get(table, []):
                value = row.get(field)
                if value is not None and any(r.get(field) == value for r in rows):
                    raise StoreError(
                        f'duplicate key value violates unique constraint "{table}_{field}_key"',
                        code=UNIQUE_VIOLATION,
                        status=409,
                    )

            stored = dict(row)
            stored.setdefault("id", str(uuid.uuid4()))
            stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(stored)
            self._write(self._path(table), rows)

        logger.debug(f"[LOCAL] Inserted row {stored['id']} into {table}")
        return stored

    def select(
        self, table: str, order_by: Optional[str] = None, descending: bool = True
    ) -> List[Dict[str, Any]]:
        rows = self._rows(table)
        if not order_by:
            return rows

        # Rows missing the field go last, like Postgres NULLS LAST on a desc sort
        present = [r for r in rows if r.get(order_by) is not None]
        missing = [r for r in rows if r.get(order_by) is None]
        present.sort(key=lambda r: r[order_by], reverse=descending)
        return present + missing

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def get_session(self, access_token: Optional[str]) -> Optional[AdminSession]:
        if not access_token:
            return None
        sessions = self._read(self.base_dir / self.SESSIONS_FILE) or {}
        user = sessions.get(access_token)
        if not user:
            return None
        return AdminSession(user_id=user["user_id"], email=user.get("email"), access_token=access_token)

    def is_admin(self, user_id: str) -> bool:
        try:
            rows = self._rows(self.admin_table)
        except StoreError as e:
            logger.error(f"Admin lookup failed for user {user_id}: {e}")
            return False
        return any(r.get("id") == user_id and r.get("is_admin") for r in rows)

    def register_session(self, access_token: str, user_id: str, email: Optional[str] = None, is_admin: bool = False):
        """Seed a session (and its admin flag) for local development."""
        with self._lock:
            sessions_path = self.base_dir / self.SESSIONS_FILE
            sessions = self._read(sessions_path) or {}
            sessions[access_token] = {"user_id": user_id, "email": email}
            self._write(sessions_path, sessions)

            admins = [r for r in self._rows(self.admin_table) if r.get("id") != user_id]
            admins.append({"id": user_id, "is_admin": is_admin})
            self._write(self._path(self.admin_table), admins)
