"""Backend selection for the CV Portal."""

import logging
from typing import Optional

from config.settings import Settings, get_config
from .base import DataStore
from .local_backend import LocalStoreBackend
from .supabase_backend import SupabaseBackend

logger = logging.getLogger(__name__)


def get_data_store(config: Optional[Settings] = None) -> DataStore:
    """Return the local JSON store in local mode, the Supabase backend otherwise."""
    config = config or get_config()

    if config.portal.local_mode:
        logger.info(f"Data store running in LOCAL mode. Root: {config.portal.local_root}")
        return LocalStoreBackend(
            base_dir=config.portal.local_root,
            unique_fields=config.portal.unique_fields,
            admin_table=config.supabase.admin_table,
        )

    logger.info("Data store running in SUPABASE mode.")
    return SupabaseBackend(config.supabase)
