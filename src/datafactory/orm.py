"""Contract for the ORM dependency DataFactory persists through.

DataFactory does not talk to a database itself. The test suite provides an
ORM module (by overriding the ``datafactory_orm`` fixture) which tells
DataFactory:

- whether it is a data-mapper ORM (``data_mapper = True``), in which case
  records are saved through ``get_entity_manager()`` with a RepositoryStore;
- its own ``cleanup`` setting. When that is truthy the ORM is expected to
  undo test data itself (for example by rolling back a transaction) and
  DataFactory skips its cleanup pass.

Example:
    >>> class SQLAlchemyModule(OrmModule):
    ...     data_mapper = True
    ...
    ...     def __init__(self, session):
    ...         super().__init__({"cleanup": False})
    ...         self.session = session
    ...
    ...     def get_entity_manager(self):
    ...         return self.session
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ORM(Protocol):
    """Protocol every injected dependency must satisfy."""

    data_mapper: bool

    def get_entity_manager(self) -> Any:
        """Return the session/entity manager used by a RepositoryStore."""
        ...

    def get_config(self, key: str, default: Any = None) -> Any:
        """Return one of the dependency's own configuration values."""
        ...


class OrmModule:
    """Convenience base class implementing the ORM protocol.

    Active-record ORMs (models with ``save()``/``delete()``) can use this
    class as-is. Data-mapper ORMs set ``data_mapper = True`` and override
    ``get_entity_manager``.

    Args:
        config: The dependency's configuration, read on every access so
            changes made during a run are honoured.
    """

    data_mapper: bool = False

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config: dict[str, Any] = dict(config or {})

    def get_entity_manager(self) -> Any:
        raise NotImplementedError(f"{type(self).__name__} is not a data-mapper ORM module")

    def get_config(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)


def is_data_mapper(orm: Any) -> bool:
    """Read the data-mapper capability flag of a dependency."""
    return getattr(orm, "data_mapper", False) is True
