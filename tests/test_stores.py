"""Tests for store adapters and the store registry."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from datafactory import FactoryEngine, ModelStore, RepositoryStore, SaveFailedError, Store
from datafactory.errors import ModuleConfigError
from datafactory.stores import (
    register_store,
    registered_stores,
    resolve_store,
    unregister_store,
)
from tests.models import (
    Article,
    CustomStore,
    CustomStoreFactory,
    FakeSession,
    InMemoryDatabase,
    Invalid,
    Widget,
    custom_store_instance,
)


class TestAbstractStore:
    def test_pending_then_saved(self) -> None:
        store = CustomStore()
        obj = Widget()

        store.mark_pending(obj)
        assert store.is_pending(obj)
        assert store.pending() == [obj]

        store.persist(obj)
        assert not store.is_pending(obj)
        assert store.is_saved(obj)
        assert store.rows == [obj]

    def test_records_tracked_by_identity(self) -> None:
        store = CustomStore()
        first, second = Article("same"), Article("same")
        assert first == second

        store.mark_pending(first)
        store.persist(first)

        assert store.is_saved(first)
        assert not store.is_saved(second)

    def test_persisting_twice_registers_once(self) -> None:
        store = CustomStore()
        obj = Widget()

        store.persist(obj)
        store.persist(obj)

        assert store.saved() == [obj]

    def test_registries_are_copies(self) -> None:
        store = CustomStore()
        store.persist(Widget())

        store.saved().clear()

        assert len(store.saved()) == 1

    def test_delete_saved_empties_registry(self) -> None:
        store = CustomStore()
        for _ in range(3):
            store.persist(Widget())

        store.delete_saved()

        assert store.saved() == []
        assert store.rows == []

    def test_satisfies_protocol(self) -> None:
        assert isinstance(CustomStore(), Store)
        assert isinstance(ModelStore(), Store)
        assert isinstance(RepositoryStore(FakeSession()), Store)


class TestModelStore:
    def test_save_and_delete(self, db: InMemoryDatabase) -> None:
        store = ModelStore()
        widget = Widget(name="w")

        store.persist(widget)
        store.delete_saved()

        assert db.saves == [widget]
        assert db.deletes == [widget]

    def test_false_return_raises_save_failed(self) -> None:
        store = ModelStore()
        obj = Invalid()
        store.mark_pending(obj)

        with pytest.raises(SaveFailedError) as exc_info:
            store.persist(obj)

        assert exc_info.value.model == "Invalid"
        assert exc_info.value.errors == "name is required"
        assert not store.is_saved(obj)
        assert not store.is_pending(obj)

    def test_custom_method_names(self) -> None:
        obj = MagicMock()
        store = ModelStore(save_method="put", delete_method="destroy")

        store.persist(obj)
        store.delete_saved()

        obj.put.assert_called_once_with()
        obj.destroy.assert_called_once_with()
        obj.save.assert_not_called()

    def test_model_without_save_method(self) -> None:
        with pytest.raises(AttributeError, match="Article.save"):
            ModelStore().persist(Article("plain"))


class TestRepositoryStore:
    def test_save_adds_and_flushes(self, session: FakeSession) -> None:
        store = RepositoryStore(session)
        article = Article("hello")

        store.persist(article)

        assert session.added == [article]
        assert article.id == 1
        assert session.flushes == 1

    def test_delete_saved_deletes_then_flushes_once(self, session: FakeSession) -> None:
        store = RepositoryStore(session)
        articles = [Article(f"a{i}") for i in range(3)]
        for article in articles:
            store.persist(article)

        store.delete_saved()

        assert session.deleted == list(reversed(articles))
        assert session.flushes == 4

    def test_engine_with_repository_store(self, session: FakeSession) -> None:
        engine = FactoryEngine(RepositoryStore(session))
        engine.define(Article).set_definitions({"title": "t"})

        article = engine.create("Article")
        engine.delete_saved()

        assert article.id == 1
        assert session.deleted == [article]

    def test_delete_failure_aborts_pass(self) -> None:
        session = MagicMock()
        session.delete.side_effect = [None, RuntimeError("constraint violation")]
        store = RepositoryStore(session)
        first, second, third = Article("1"), Article("2"), Article("3")
        for article in (first, second, third):
            store.persist(article)
        session.flush.reset_mock()

        with pytest.raises(RuntimeError):
            store.delete_saved()

        assert store.saved() == [first, second]
        session.flush.assert_not_called()


class TestRegistry:
    def test_register_and_resolve_class(self) -> None:
        register_store("memory", CustomStore)

        assert registered_stores() == ["memory"]
        assert isinstance(resolve_store("memory"), CustomStore)

    def test_registered_factory_function_is_called(self) -> None:
        store = CustomStore()
        register_store("shared", lambda: store)

        assert resolve_store("shared") is store

    def test_duplicate_registration(self) -> None:
        register_store("memory", CustomStore)

        with pytest.raises(ValueError, match="already registered"):
            register_store("memory", CustomStore)

    def test_unregister(self) -> None:
        register_store("memory", CustomStore)
        unregister_store("memory")
        unregister_store("memory")

        assert registered_stores() == []

    def test_import_path_to_class_is_instantiated(self) -> None:
        store = resolve_store("tests.models:CustomStoreFactory")

        assert isinstance(store, CustomStoreFactory)

    def test_import_path_to_instance_is_returned_as_is(self) -> None:
        assert resolve_store("tests.models.custom_store_instance") is custom_store_instance

    def test_entry_point(self) -> None:
        ep = MagicMock()
        ep.name = "plugin-store"
        ep.value = "plugin_pkg:Store"
        ep.load.return_value = CustomStore

        with patch("datafactory.stores.registry.entry_points", return_value=[ep]) as mock_eps:
            store = resolve_store("plugin-store")

        mock_eps.assert_called_once_with(group="datafactory.stores")
        assert isinstance(store, CustomStore)

    def test_registry_wins_over_entry_points(self) -> None:
        register_store("memory", CustomStore)

        with patch("datafactory.stores.registry.entry_points") as mock_eps:
            resolve_store("memory")

        mock_eps.assert_not_called()

    def test_unknown_identifier(self) -> None:
        with pytest.raises(ModuleConfigError, match="Custom store 'nowhere.Store' was not found"):
            resolve_store("nowhere.Store")

    def test_constructor_failure(self) -> None:
        class Broken:
            def __init__(self) -> None:
                raise RuntimeError("boom")

        register_store("broken", Broken)

        with pytest.raises(ModuleConfigError, match="could not be constructed") as exc_info:
            resolve_store("broken")

        assert isinstance(exc_info.value.cause, RuntimeError)
