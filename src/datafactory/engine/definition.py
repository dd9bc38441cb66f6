"""Blueprint definitions."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from datafactory.errors import ModelNotFoundError
from datafactory.utils import import_string

Maker = Callable[[type, dict[str, Any]], Any]
Callback = Callable[[Any, bool], Any]


class Definition:
    """A named blueprint describing how to generate one kind of record.

    Definition names may carry a group prefix (``"admin:User"``). A group
    definition starts as a copy of the base definition and then overrides
    it.

    Attributes:
        name: Full name including the group prefix.
        base_name: Name without the group prefix.
        group: The group prefix, or None.
        definitions: Attribute name to generator mapping.
        maker: Optional ``maker(model, attributes)`` used instead of
            ``model(**attributes)``.
        callback: Optional ``callback(obj, saved)`` run after creation.
    """

    def __init__(self, name: str, model: type | str | None = None) -> None:
        self.name = name
        self.group, _, self.base_name = name.rpartition(":")
        self.group = self.group or None
        self._model = model
        self.definitions: dict[str, Any] = {}
        self.maker: Maker | None = None
        self.callback: Callback | None = None

    def __repr__(self) -> str:
        return f"Definition({self.name!r}, fields={list(self.definitions)})"

    @property
    def model(self) -> type:
        """The model class, resolved from an import path when needed.

        Raises:
            ModelNotFoundError: If no class can be resolved.
        """
        model = self._model if self._model is not None else self.base_name
        if isinstance(model, str):
            try:
                model = import_string(model)
            except ImportError as e:
                raise ModelNotFoundError(model, cause=e) from e
            if not callable(model):
                raise ModelNotFoundError(self.base_name)
            self._model = model
        return model

    def set_definitions(self, definitions: dict[str, Any]) -> Definition:
        """Merge ``definitions`` into the existing attribute mapping."""
        self.definitions.update(definitions)
        return self

    def clear_definitions(self) -> Definition:
        self.definitions = {}
        return self

    def set_maker(self, maker: Maker) -> Definition:
        self.maker = maker
        return self

    def clear_maker(self) -> Definition:
        self.maker = None
        return self

    def set_callback(self, callback: Callback) -> Definition:
        self.callback = callback
        return self

    def clear_callback(self) -> Definition:
        self.callback = None
        return self

    def make(self, attributes: dict[str, Any]) -> Any:
        """Instantiate the model with fully generated attributes."""
        if self.maker is not None:
            return self.maker(self.model, attributes)
        return self.model(**attributes)

    def inherit(self, base: Definition) -> None:
        """Copy the base definition's model, attributes, maker and callback."""
        if self._model is None:
            self._model = base._model if base._model is not None else base.base_name
        self.definitions = dict(base.definitions)
        self.maker = base.maker
        self.callback = base.callback
