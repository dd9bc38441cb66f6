"""DataFactory - test data factories for pytest.

Generate records from named blueprints filled with Faker data, save them
through your ORM and have them removed after every test.

Quick Start:
    # tests/factories/users.py (loaded with the engine bound to `fm`)
    from datafactory import Faker
    from app.models import User

    fm.define(User).set_definitions({
        "name": Faker.name(),
        "email": Faker.unique.email(),
    })

    # tests/test_users.py
    def test_user_listing(datafactory, client):
        datafactory.have_multiple("User", 3)
        assert len(client.get("/users").json()) == 3
"""

from __future__ import annotations

from datafactory.config import DataFactoryConfig, load_config
from datafactory.coordinator import DataFactory
from datafactory.engine import (
    Definition,
    FactoryEngine,
    Faker,
    LazyAttribute,
    LazyFunction,
)
from datafactory.errors import (
    ConfigLoadError,
    DataFactoryError,
    DefinitionAlreadyDefinedError,
    DefinitionNotFoundError,
    DependencyError,
    DirectoryNotFoundError,
    ErrorCode,
    ModelNotFoundError,
    ModuleConfigError,
    SaveFailedError,
)
from datafactory.orm import ORM, OrmModule
from datafactory.stores import (
    AbstractStore,
    ModelStore,
    RepositoryStore,
    Store,
    register_store,
    unregister_store,
)

__version__ = "0.3.0"

__all__ = [
    "__version__",
    # Coordinator
    "DataFactory",
    "DataFactoryConfig",
    "load_config",
    # Engine
    "FactoryEngine",
    "Definition",
    "Faker",
    "LazyAttribute",
    "LazyFunction",
    # Dependency
    "ORM",
    "OrmModule",
    # Stores
    "Store",
    "AbstractStore",
    "ModelStore",
    "RepositoryStore",
    "register_store",
    "unregister_store",
    # Errors
    "ErrorCode",
    "DataFactoryError",
    "ModuleConfigError",
    "ConfigLoadError",
    "DependencyError",
    "DirectoryNotFoundError",
    "DefinitionAlreadyDefinedError",
    "DefinitionNotFoundError",
    "ModelNotFoundError",
    "SaveFailedError",
]
