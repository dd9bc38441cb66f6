"""Store adapters for persisting generated records."""

from datafactory.stores.base import AbstractStore, Store
from datafactory.stores.model import ModelStore
from datafactory.stores.registry import (
    ENTRY_POINT_GROUP,
    clear_stores,
    register_store,
    registered_stores,
    resolve_store,
    unregister_store,
)
from datafactory.stores.repository import RepositoryStore

__all__ = [
    "Store",
    "AbstractStore",
    "ModelStore",
    "RepositoryStore",
    "ENTRY_POINT_GROUP",
    "register_store",
    "unregister_store",
    "clear_stores",
    "registered_stores",
    "resolve_store",
]
