"""Dashboard loader — gates access, fetches submissions and positions, and aggregates."""

import logging
import time
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from config.models import AdminSession, DashboardView, SubmissionRecord
from config.settings import PortalConfig, SupabaseConfig, get_portal_config, get_supabase_config
from services.storage.base import DataStore
from services.storage.errors import AccessDeniedError, NotAuthenticatedError, StoreError
from .aggregator import DashboardAggregator

logger = logging.getLogger(__name__)


class DashboardLoader:
    """
    Builds the admin dashboard view.

    - Resolves an access token into an explicit AdminSession
    - Reads submissions (ordered by match score) and positions independently
    - A failed read degrades only its own section; the other still renders
    """

    def __init__(
        self,
        store: DataStore,
        aggregator: Optional[DashboardAggregator] = None,
        tables: Optional[SupabaseConfig] = None,
        portal: Optional[PortalConfig] = None,
    ):
        self.store = store
        self.aggregator = aggregator or DashboardAggregator()
        self.tables = tables or get_supabase_config()
        self.portal = portal or get_portal_config()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def authorize(self, access_token: Optional[str]) -> AdminSession:
        """Resolve a token to an admin session or raise a DashboardAccessError."""
        try:
            session = self.store.get_session(access_token)
        except StoreError as e:
            logger.error(f"Session lookup failed: {e}")
            raise NotAuthenticatedError("Could not verify session") from e

        if session is None:
            raise NotAuthenticatedError("Not signed in")
        return self.store.require_admin_role(session)

    def load(self, session: AdminSession, today: Optional[date] = None) -> DashboardView:
        """Fetch both collections and compute the dashboard for an admin session."""
        if not session.is_admin:
            raise AccessDeniedError()

        start_time = time.time()
        errors: Dict[str, str] = {}

        submissions, error = self._load_submissions()
        if error:
            errors["submissions"] = error

        positions, error = self._load_positions()
        if error:
            errors["positions"] = error

        summary = self.aggregator.aggregate(submissions, positions, today=today)

        logger.info(
            f"Dashboard loaded for {session.user_id} in {time.time() - start_time:.2f}s: "
            f"{len(submissions)} submissions, {len(positions)} positions, {len(errors)} failed sections"
        )
        return DashboardView(
            submissions=submissions,
            positions=positions,
            summary=summary,
            errors=errors,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _load_submissions(self) -> Tuple[List[SubmissionRecord], Optional[str]]:
        try:
            rows = self.store.select(
                self.tables.submissions_table, order_by=self.portal.order_field, descending=True
            )
        except StoreError as e:
            logger.warning(f"Failed to load submissions: {e}")
            return [], f"Failed to load submissions: {e.message}"

        records = []
        for row in rows:
            try:
                records.append(SubmissionRecord(**row))
            except ValidationError as e:
                logger.warning(f"Skipping invalid submission row {row.get('id')}: {e}")
        return records, None

    def _load_positions(self) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        try:
            return self.store.select(self.tables.positions_table), None
        except StoreError as e:
            logger.warning(f"Failed to load positions: {e}")
            return [], f"Failed to load positions: {e.message}"
