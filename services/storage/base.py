"""
Abstract data store for the CV Portal.

Backends expose the four capabilities the portal needs from the hosted
backend: insert, ordered select, session lookup and the admin-role check.
"""

import abc
import logging
from typing import Any, Dict, List, Optional

from config.models import AdminSession
from .errors import AccessDeniedError

logger = logging.getLogger(__name__)


class DataStore(abc.ABC):
    """Insert/query interface over the portal's tables."""

    @abc.abstractmethod
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored. Raises StoreError."""
        raise NotImplementedError()

    @abc.abstractmethod
    def select(
        self, table: str, order_by: Optional[str] = None, descending: bool = True
    ) -> List[Dict[str, Any]]:
        """Return all rows of a table, optionally sorted on one field. Raises StoreError."""
        raise NotImplementedError()

    @abc.abstractmethod
    def get_session(self, access_token: Optional[str]) -> Optional[AdminSession]:
        """Resolve an access token to a session, or None when absent/expired."""
        raise NotImplementedError()

    @abc.abstractmethod
    def is_admin(self, user_id: str) -> bool:
        """Return True when the user is flagged as admin."""
        raise NotImplementedError()

    def require_admin_role(self, session: AdminSession) -> AdminSession:
        """Return the session with its admin flag confirmed, or raise AccessDeniedError."""
        if not self.is_admin(session.user_id):
            logger.warning(f"Admin access denied for user {session.user_id}")
            raise AccessDeniedError()
        return session.model_copy(update={"is_admin": True})
