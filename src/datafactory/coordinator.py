"""DataFactory: owns the factory engine for a test session.

The coordinator is driven by the host test runner through three lifecycle
hooks:

- ``before_suite``: build the store, create a fresh engine, load factories.
- ``after_test``: delete what the test created, unless cleanup is disabled
  here or handled by the ORM dependency.
- ``on_reconfigure``: clean up with the current configuration, then switch
  configuration and start over.

Test code only uses ``define``, ``have``, ``make`` and ``have_multiple``.

Example:
    >>> factory = DataFactory(load_config("datafactory.yaml"), root_dir=".")
    >>> factory.inject(SQLAlchemyModule(session))
    >>> factory.before_suite()
    >>>
    >>> user = factory.have("User", {"is_active": True})
    >>> draft = factory.make("Post")
    >>> posts = factory.have_multiple("Post", 3, {"author": user})
    >>>
    >>> factory.after_test(test)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from datafactory.config import DataFactoryConfig
from datafactory.engine import Definition, FactoryEngine
from datafactory.errors import DependencyError, ModuleConfigError
from datafactory.orm import ORM, is_data_mapper
from datafactory.stores import RepositoryStore, Store, resolve_store

logger = logging.getLogger(__name__)

DEPENDENCY_MESSAGE = """ORM module with get_config() (and get_entity_manager() for data-mapper ORMs) is required:
--
# conftest.py
@pytest.fixture(scope="session")
def datafactory_orm():
    return MyOrmModule(session)
--"""


class DataFactory:
    """Coordinates the factory engine, its store and per-test cleanup.

    Attributes:
        config: Active configuration.
        root_dir: Directory ``factories`` entries are resolved against.
        orm: Injected ORM dependency.
        store: Active store adapter, or None when the engine uses its default.
        engine: Active factory engine, or None before ``before_suite``.
    """

    def __init__(
        self,
        config: DataFactoryConfig | None = None,
        root_dir: str | Path | None = None,
    ) -> None:
        self.config = config if config is not None else DataFactoryConfig()
        self.root_dir = Path(root_dir) if root_dir is not None else Path.cwd()
        self.orm: ORM | None = None
        self.store: Store | None = None
        self.engine: FactoryEngine | None = None
        self._data_mapper = False
        self._backup_config = self.config
        self._inline_definitions: list[Definition] = []

    # =========================================================================
    # Lifecycle hooks
    # =========================================================================

    def inject(self, orm: Any) -> None:
        """Attach the ORM dependency. Must happen before ``before_suite``.

        Raises:
            DependencyError: If ``orm`` does not satisfy the ORM protocol.
        """
        if orm is None or not callable(getattr(orm, "get_config", None)):
            raise DependencyError(DEPENDENCY_MESSAGE, dependency=repr(orm))

        data_mapper = is_data_mapper(orm)
        if data_mapper and not callable(getattr(orm, "get_entity_manager", None)):
            raise DependencyError(
                f"{type(orm).__name__} is a data-mapper ORM but has no get_entity_manager()",
                dependency=repr(orm),
            )

        self.orm = orm
        self._data_mapper = data_mapper
        logger.debug(f"Injected ORM dependency {type(orm).__name__} (data_mapper={data_mapper})")

    def before_suite(self, settings: dict[str, Any] | None = None) -> None:
        """Create a fresh engine for the session and load factory files.

        Args:
            settings: Suite settings from the host runner; passed through.

        Raises:
            DependencyError: If no ORM dependency was injected.
            ModuleConfigError: If a ``factories`` path does not exist or
                ``custom_store`` cannot be resolved.
        """
        if self.orm is None:
            raise DependencyError(DEPENDENCY_MESSAGE)

        self.store = self.get_store()
        self.engine = FactoryEngine(self.store)
        logger.info(
            f"DataFactory engine ready with {type(self.engine.store).__name__} "
            f"(settings: {settings or {}})"
        )

        for factory_path in self.config.factories:
            realpath = (self.root_dir / factory_path).resolve()
            if not realpath.exists():
                raise ModuleConfigError(
                    "The path to one of your factories is not correct. Please specify "
                    "the directory relative to the datafactory.yaml file (ie. tests/factories).",
                    path=factory_path,
                    resolved=str(realpath),
                )
            self.engine.load_factories(realpath)

    def get_store(self) -> Store | None:
        """Select the store adapter: custom store, then repository, then none."""
        if self.config.custom_store:
            store = resolve_store(self.config.custom_store)
            create = getattr(store, "create", None)
            if callable(create):
                return create()
            return store

        if self._data_mapper:
            return RepositoryStore(self.orm.get_entity_manager())

        return None

    def after_test(self, test: Any = None) -> None:
        """Delete the records created during ``test`` when cleanup applies."""
        if self._should_cleanup():
            logger.debug(f"Cleaning up records created by {test}")
            self._require_engine().delete_saved()

    def on_reconfigure(
        self,
        config: DataFactoryConfig,
        settings: dict[str, Any] | None = None,
        flush: bool = True,
    ) -> None:
        """Flush the current engine, then re-initialize with ``config``.

        The switch to ``config`` happens even when the flush fails; the
        flush error is raised afterwards. Blueprints added with ``define``
        are carried over to the new engine.

        Args:
            flush: Set to False to skip the cleanup pass, e.g. when the
                previous pass just failed.
        """
        try:
            if flush and self.engine is not None and self._should_cleanup():
                self.engine.delete_saved()
        finally:
            self.config = config
            self.before_suite(settings)
            self._restore_inline_definitions()

    def reconfigure(self, settings: dict[str, Any] | None = None, **overrides: Any) -> None:
        """Apply ``overrides`` on top of the original configuration.

        Raises:
            ModuleConfigError: If the resulting configuration is invalid.
        """
        config = self._backup_config.merged(**overrides)
        logger.info(f"Reconfiguring DataFactory with {overrides}")
        self.on_reconfigure(config, settings)

    def reset_config(self, settings: dict[str, Any] | None = None, flush: bool = True) -> None:
        """Return to the configuration the coordinator was created with."""
        self.on_reconfigure(self._backup_config, settings, flush=flush)

    def _should_cleanup(self) -> bool:
        if self.config.skip_cleanup:
            logger.debug("Cleanup skipped: disabled in DataFactory config")
            return False

        # Read on every call; the ORM may change its setting during a run
        if self.orm is not None and self.orm.get_config("cleanup"):
            logger.debug("Cleanup skipped: handled by the ORM dependency")
            return False

        return True

    def _restore_inline_definitions(self) -> None:
        for definition in self._inline_definitions:
            # Factory files of the new configuration win over inline blueprints
            if self.engine.has_definition(definition.name):
                logger.debug(f"Inline blueprint {definition.name} replaced by a factory file")
                continue
            self.engine.add_definition(definition)

    def _require_engine(self) -> FactoryEngine:
        if self.engine is None:
            raise ModuleConfigError("DataFactory is not initialized; call before_suite() first")
        return self.engine

    # =========================================================================
    # Test API
    # =========================================================================

    def define(self, model: str | type, fields: dict[str, Any]) -> Definition:
        """Create a model definition, e.g. from a session fixture.

            factory.define("User", {"name": Faker.name(), "email": Faker.email()})

        Raises:
            DefinitionAlreadyDefinedError: If the model is already defined.
        """
        definition = self._require_engine().define(model).set_definitions(fields)
        self._inline_definitions.append(definition)
        return definition

    def have(self, name: str, attributes: dict[str, Any] | None = None) -> Any:
        """Generate and save a record.

            factory.have("User")  # creates user
            factory.have("User", {"is_active": True})  # creates active user

        Returns the created record.
        """
        return self._require_engine().create(name, attributes)

    def make(self, name: str, attributes: dict[str, Any] | None = None) -> Any:
        """Generate a record instance without saving it. Use ``have`` for that."""
        return self._require_engine().instance(name, attributes)

    def have_multiple(
        self,
        name: str,
        times: int,
        attributes: dict[str, Any] | None = None,
    ) -> list[Any]:
        """Generate and save ``times`` records.

            factory.have_multiple("User", 10)  # create 10 users
            factory.have_multiple("User", 10, {"is_active": True})
        """
        return self._require_engine().seed(times, name, attributes)
