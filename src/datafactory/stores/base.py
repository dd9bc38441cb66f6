"""Store adapters persist and delete the records produced by the engine.

A store keeps two registries: records marked *pending* (about to be saved
by ``FactoryEngine.create``) and records already *saved*. The saved registry
is what a cleanup pass deletes.

Example:
    >>> store = ModelStore()
    >>> engine = FactoryEngine(store)
    >>> user = engine.create("User")
    >>> store.is_saved(user)
    True
    >>> store.delete_saved()
    >>> store.saved()
    []
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Store(Protocol):
    """Protocol defining the interface the factory engine persists through.

    Any object implementing these methods can be used as a store, which is
    what makes ``customStore`` work with user-supplied classes.
    """

    def mark_pending(self, obj: Any) -> None:
        """Mark a record as about to be persisted."""
        ...

    def is_pending(self, obj: Any) -> bool:
        ...

    def persist(self, obj: Any) -> None:
        """Save a pending record and register it for cleanup.

        Raises:
            SaveFailedError: If the model reports the save failed.
        """
        ...

    def is_saved(self, obj: Any) -> bool:
        ...

    def pending(self) -> list[Any]:
        ...

    def saved(self) -> list[Any]:
        """Records saved since the last cleanup pass, in creation order."""
        ...

    def delete_saved(self) -> None:
        """Delete every saved record and empty the saved registry."""
        ...


class AbstractStore(ABC):
    """Base store with pending/saved bookkeeping.

    Records are tracked by identity, so unhashable models (and models with
    a custom ``__eq__``) are safe to register.

    Subclasses implement ``_save`` and ``_delete``; ``_flush`` is called
    once after a complete delete pass.
    """

    def __init__(self) -> None:
        self._pending: list[Any] = []
        self._saved: list[Any] = []

    def mark_pending(self, obj: Any) -> None:
        if not self.is_pending(obj):
            self._pending.append(obj)

    def is_pending(self, obj: Any) -> bool:
        return _contains(self._pending, obj)

    def is_saved(self, obj: Any) -> bool:
        return _contains(self._saved, obj)

    def pending(self) -> list[Any]:
        return self._pending.copy()

    def saved(self) -> list[Any]:
        return self._saved.copy()

    def persist(self, obj: Any) -> None:
        try:
            self._save(obj)
        finally:
            _remove(self._pending, obj)
        if not self.is_saved(obj):
            self._saved.append(obj)
        logger.debug(f"Persisted {type(obj).__name__} via {type(self).__name__}")

    def delete_saved(self) -> None:
        """Delete saved records, most recent first.

        Related records are created before the records that reference them,
        so deleting in reverse keeps foreign keys valid. The first failing
        delete aborts the pass; records not yet deleted stay registered.
        """
        total = len(self._saved)
        while self._saved:
            obj = self._saved[-1]
            self._delete(obj)
            self._saved.pop()
            logger.debug(f"Deleted {type(obj).__name__} via {type(self).__name__}")

        self._flush()
        if total:
            logger.info(f"Deleted {total} saved record(s)")

    @abstractmethod
    def _save(self, obj: Any) -> None:
        pass

    @abstractmethod
    def _delete(self, obj: Any) -> None:
        pass

    def _flush(self) -> None:
        pass


def _contains(items: list[Any], obj: Any) -> bool:
    return any(item is obj for item in items)


def _remove(items: list[Any], obj: Any) -> None:
    for index, item in enumerate(items):
        if item is obj:
            del items[index]
            return
