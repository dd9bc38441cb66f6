"""Active-record store: models save and delete themselves."""

from __future__ import annotations

from typing import Any

from datafactory.errors import SaveFailedError
from datafactory.stores.base import AbstractStore


class ModelStore(AbstractStore):
    """Store for models that know how to persist themselves.

    This is the engine's default store. It fits Django, Peewee and any
    model exposing ``save()``/``delete()`` style methods.

    Args:
        save_method: Name of the method that persists a model.
        delete_method: Name of the method that removes a model.
    """

    def __init__(self, save_method: str = "save", delete_method: str = "delete") -> None:
        super().__init__()
        self.save_method = save_method
        self.delete_method = delete_method

    def _save(self, obj: Any) -> None:
        method = self._method(obj, self.save_method)
        # Some ORMs signal validation failures with a False return
        if method() is False:
            errors = getattr(obj, "errors", None)
            raise SaveFailedError(type(obj).__name__, str(errors) if errors else None)

    def _delete(self, obj: Any) -> None:
        self._method(obj, self.delete_method)()

    def _method(self, obj: Any, name: str) -> Any:
        method = getattr(obj, name, None)
        if not callable(method):
            raise AttributeError(
                f"The {self.save_method}/{self.delete_method} store needs "
                f"'{type(obj).__name__}.{name}()'; configure a RepositoryStore "
                f"or a customStore for this model"
            )
        return method
