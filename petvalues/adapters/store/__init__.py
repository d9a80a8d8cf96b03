"""Catalog store adapters - abstracts over the hosted database."""

from petvalues.adapters.store.base import AbstractCatalogStore
from petvalues.adapters.store.factory import create_store
from petvalues.adapters.store.supabase_rest import SupabaseRestStore

__all__ = [
    "AbstractCatalogStore",
    "SupabaseRestStore",
    "create_store",
]
