"""Pytest fixtures for DataFactory tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from datafactory import DataFactory, DataFactoryConfig, FactoryEngine, OrmModule
from datafactory.stores import clear_stores
from tests.models import FakeSession, InMemoryDatabase, database

WIDGET_FACTORIES = '''
from datafactory import Faker
from tests.models import Widget

fm.define(Widget).set_definitions({
    "name": Faker.word(),
    "color": "red",
})
'''


@pytest.fixture(autouse=True)
def db() -> InMemoryDatabase:
    """Fresh in-memory database for every test."""
    database.reset()
    return database


@pytest.fixture(autouse=True)
def reset_store_registry():
    clear_stores()
    yield
    clear_stores()


@pytest.fixture
def engine() -> FactoryEngine:
    return FactoryEngine()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def orm() -> OrmModule:
    """Active-record ORM dependency that leaves cleanup to DataFactory."""
    return OrmModule({"cleanup": False})


@pytest.fixture
def factories_dir(tmp_path: Path) -> Path:
    """A 'defs' directory declaring the Widget blueprint."""
    defs = tmp_path / "defs"
    defs.mkdir()
    (defs / "widgets.py").write_text(WIDGET_FACTORIES)
    return defs


@pytest.fixture
def make_factory(tmp_path: Path, orm: OrmModule):
    """Build an injected, initialized DataFactory rooted at tmp_path."""

    def _make(orm_module: OrmModule | None = None, **config: object) -> DataFactory:
        factory = DataFactory(DataFactoryConfig(**config), root_dir=tmp_path)
        factory.inject(orm_module if orm_module is not None else orm)
        factory.before_suite()
        return factory

    return _make
