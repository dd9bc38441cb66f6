"""Registry resolving ``customStore`` identifiers to store adapters.

Identifiers are looked up in this order:

1. Names registered in-process with ``register_store``.
2. Entry points in the ``datafactory.stores`` group.
3. The identifier itself as an import path (``"app.tests.stores:MyStore"``).

A resolved class is instantiated without arguments and a registered factory
function is called; the result is the candidate adapter. Whether the
candidate is used directly or asked to ``create()`` the adapter is decided
by the coordinator.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from importlib.metadata import entry_points
from typing import Any

from datafactory.errors import ModuleConfigError
from datafactory.utils import import_string

logger = logging.getLogger(__name__)

# Entry point group for store packages
ENTRY_POINT_GROUP = "datafactory.stores"

_stores: dict[str, Callable[[], Any]] = {}


def register_store(name: str, factory: Callable[[], Any]) -> None:
    """Register a store class or zero-argument factory under ``name``."""
    if name in _stores:
        raise ValueError(f"Store '{name}' is already registered")
    _stores[name] = factory


def unregister_store(name: str) -> None:
    _stores.pop(name, None)


def clear_stores() -> None:
    _stores.clear()


def registered_stores() -> list[str]:
    return list(_stores.keys())


def resolve_store(identifier: str) -> Any:
    """Resolve ``identifier`` to a store candidate.

    Raises:
        ModuleConfigError: If the identifier cannot be resolved or the
            resolved object cannot be constructed.
    """
    target = _lookup(identifier)

    if isinstance(target, type) or identifier in _stores:
        try:
            return target()
        except Exception as e:
            raise ModuleConfigError(
                f"Custom store '{identifier}' could not be constructed: {e}",
                cause=e,
                custom_store=identifier,
            ) from e

    return target


def _lookup(identifier: str) -> Any:
    if identifier in _stores:
        return _stores[identifier]

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        if ep.name == identifier:
            logger.info(f"Loading custom store '{identifier}' from entry point {ep.value}")
            return ep.load()

    try:
        return import_string(identifier)
    except ImportError as e:
        raise ModuleConfigError(
            f"Custom store '{identifier}' was not found",
            cause=e,
            custom_store=identifier,
            suggestions=[
                "Use an import path such as 'tests.support.stores:MyStoreFactory'",
                "Or register it first with datafactory.register_store()",
            ],
        ) from e
