"""The factory engine: blueprints in, persisted records out.

Example:
    >>> engine = FactoryEngine(RepositoryStore(session))
    >>> engine.define(User).set_definitions({"name": Faker.name()})
    >>> engine.define("admin:User").set_definitions({"is_admin": True})
    >>>
    >>> user = engine.create("User", {"email": "a@example.com"})
    >>> admin = engine.instance("admin:User")  # not persisted
    >>> users = engine.seed(3, "User")
    >>>
    >>> engine.delete_saved()  # removes the 4 saved users
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from datafactory.engine.definition import Definition
from datafactory.engine.generators import generate_all
from datafactory.engine.loader import load_factories
from datafactory.errors import DefinitionAlreadyDefinedError, DefinitionNotFoundError
from datafactory.stores.base import Store
from datafactory.stores.model import ModelStore

logger = logging.getLogger(__name__)


class FactoryEngine:
    """Holds blueprint definitions and creates records through a store.

    Args:
        store: Persistence adapter. Defaults to an active-record
            ``ModelStore`` when omitted or None.
    """

    def __init__(self, store: Store | None = None) -> None:
        self.store: Store = store if store is not None else ModelStore()
        self._definitions: dict[str, Definition] = {}

    # =========================================================================
    # Definitions
    # =========================================================================

    def define(self, name: str | type, model: type | str | None = None) -> Definition:
        """Declare a new blueprint.

        Args:
            name: A model class (the blueprint is named after it), a dotted
                import path, or any name combined with ``model``. Prefix a
                defined name with ``"group:"`` to derive a variant.
            model: The class (or import path) records are built from.

        Raises:
            DefinitionAlreadyDefinedError: If ``name`` is already defined.
            DefinitionNotFoundError: If a group's base is not defined.
        """
        if isinstance(name, type):
            model = model if model is not None else name
            name = name.__name__

        if name in self._definitions:
            raise DefinitionAlreadyDefinedError(name)

        definition = Definition(name, model)
        if definition.group is not None:
            definition.inherit(self.get_definition(definition.base_name))

        self._definitions[name] = definition
        logger.debug(f"Defined blueprint {name}")
        return definition

    def add_definition(self, definition: Definition) -> Definition:
        """Register an existing definition, e.g. one taken from another engine.

        Raises:
            DefinitionAlreadyDefinedError: If the name is already defined.
        """
        if definition.name in self._definitions:
            raise DefinitionAlreadyDefinedError(definition.name)
        self._definitions[definition.name] = definition
        return definition

    def get_definition(self, name: str) -> Definition:
        try:
            return self._definitions[name]
        except KeyError:
            raise DefinitionNotFoundError(name) from None

    def has_definition(self, name: str) -> bool:
        return name in self._definitions

    def definitions(self) -> list[str]:
        return list(self._definitions.keys())

    def load_factories(self, paths: str | Path | list[str | Path]) -> list[Path]:
        """Execute factory files with this engine bound to ``fm``."""
        return load_factories(self, paths)

    def reset(self) -> None:
        """Forget every definition. Saved records are left untouched."""
        self._definitions.clear()

    # =========================================================================
    # Records
    # =========================================================================

    def instance(self, name: str, attributes: dict[str, Any] | None = None) -> Any:
        """Generate a record without persisting or registering it."""
        obj = self._make(name, attributes, saved=False)
        self._trigger_callback(name, obj, saved=False)
        return obj

    def create(self, name: str, attributes: dict[str, Any] | None = None) -> Any:
        """Generate, persist and register a record for cleanup."""
        obj = self._make(name, attributes, saved=True)
        self.store.mark_pending(obj)
        self.store.persist(obj)
        if self._trigger_callback(name, obj, saved=True):
            self.store.persist(obj)
        return obj

    def seed(self, times: int, name: str, attributes: dict[str, Any] | None = None) -> list[Any]:
        """Create ``times`` records with the same overrides, in order."""
        if isinstance(times, bool) or not isinstance(times, int) or times < 0:
            raise ValueError(f"times must be a non-negative integer, got {times!r}")
        return [self.create(name, attributes) for _ in range(times)]

    def delete_saved(self) -> None:
        """Delete every record saved since the last call."""
        self.store.delete_saved()

    def saved(self) -> list[Any]:
        return self.store.saved()

    def pending(self) -> list[Any]:
        return self.store.pending()

    def is_saved(self, obj: Any) -> bool:
        return self.store.is_saved(obj)

    def is_pending(self, obj: Any) -> bool:
        return self.store.is_pending(obj)

    def is_pending_or_saved(self, obj: Any) -> bool:
        return self.is_pending(obj) or self.is_saved(obj)

    def _make(self, name: str, attributes: dict[str, Any] | None, saved: bool) -> Any:
        definition = self.get_definition(name)
        merged = dict(definition.definitions)
        if attributes:
            merged.update(attributes)
        values = generate_all(merged, self, saved)
        return definition.make(values)

    def _trigger_callback(self, name: str, obj: Any, saved: bool) -> bool:
        callback = self.get_definition(name).callback
        if callback is None:
            return False
        return bool(callback(obj, saved))
