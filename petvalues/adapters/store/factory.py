"""Factory for the catalog store."""

import logging

from petvalues.adapters.store.base import AbstractCatalogStore
from petvalues.adapters.store.supabase_rest import SupabaseRestStore
from petvalues.core.config import settings

logger = logging.getLogger(__name__)


def create_store() -> AbstractCatalogStore:
    """Instantiate the catalog store from ``settings.store``.

    A missing service role key is not fatal: public reads and login checks
    still work, while admin writes answer with a configuration error.

    Returns:
        AbstractCatalogStore: Configured store instance.
    """
    if not settings.store.service_role_key:
        logger.error(
            "store.service_role_key_missing",
            extra={"hint": "Set SUPABASE_SERVICE_ROLE_KEY to enable admin writes"},
        )

    return SupabaseRestStore(
        url=settings.store.url,
        anon_key=settings.store.anon_key,
        service_role_key=settings.store.service_role_key,
        timeout_seconds=settings.store.timeout_seconds,
    )
