"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from datafactory.config import DataFactoryConfig, build_config, load_config, normalize_keys
from datafactory.errors import ConfigLoadError, ModuleConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("DATAFACTORY_FACTORIES", "DATAFACTORY_CUSTOM_STORE", "DATAFACTORY_CLEANUP"):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)


class TestDataFactoryConfig:
    def test_defaults(self) -> None:
        config = DataFactoryConfig()

        assert config.factories == []
        assert config.custom_store is None
        assert config.cleanup is None
        assert config.skip_cleanup is False

    def test_single_factory_path_becomes_list(self) -> None:
        assert DataFactoryConfig(factories="tests/factories").factories == ["tests/factories"]

    def test_blank_custom_store_is_none(self) -> None:
        assert DataFactoryConfig(custom_store="  ").custom_store is None

    @pytest.mark.parametrize("cleanup, skip", [(None, False), (True, False), (False, True)])
    def test_skip_cleanup_only_when_explicitly_false(
        self, cleanup: bool | None, skip: bool
    ) -> None:
        assert DataFactoryConfig(cleanup=cleanup).skip_cleanup is skip

    def test_frozen(self) -> None:
        config = DataFactoryConfig()

        with pytest.raises(ValidationError):
            config.cleanup = False

    def test_merged_returns_new_config(self) -> None:
        config = DataFactoryConfig(factories=["a"], cleanup=True)

        merged = config.merged(cleanup=False, customStore="pkg:Store")

        assert merged.factories == ["a"]
        assert merged.cleanup is False
        assert merged.custom_store == "pkg:Store"
        assert config.cleanup is True

    def test_merged_validates(self) -> None:
        with pytest.raises(ModuleConfigError):
            DataFactoryConfig().merged(cleanup="sometimes")


class TestNormalizeKeys:
    def test_camel_case_alias(self) -> None:
        assert normalize_keys({"customStore": "x", "cleanup": False}) == {
            "custom_store": "x",
            "cleanup": False,
        }

    def test_build_config_wraps_validation_errors(self) -> None:
        with pytest.raises(ModuleConfigError) as exc_info:
            build_config({"cleanup": "sometimes"})

        assert isinstance(exc_info.value.cause, ValidationError)
        assert exc_info.value.context["errors"]


class TestLoadConfig:
    def test_no_path_gives_defaults(self) -> None:
        assert load_config() == DataFactoryConfig()

    def test_top_level_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text(
            "factories:\n  - tests/factories\ncustomStore: app.stores:Store\ncleanup: false\n"
        )

        config = load_config(path)

        assert config.factories == ["tests/factories"]
        assert config.custom_store == "app.stores:Store"
        assert config.cleanup is False

    def test_datafactory_section(self, tmp_path: Path) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text("other: 1\ndatafactory:\n  factories: tests/factories\n")

        assert load_config(path).factories == ["tests/factories"]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text("")

        assert load_config(path) == DataFactoryConfig()

    def test_missing_optional_file(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "missing.yaml") == DataFactoryConfig()

    def test_missing_required_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            load_config(tmp_path / "missing.yaml", required=True)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text("factories: [unclosed\n")

        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_config(path)

    @pytest.mark.parametrize("content", ["- a\n- b\n", "datafactory: [a]\n"])
    def test_non_mapping_content(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text(content)

        with pytest.raises(ConfigLoadError):
            load_config(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text("cleanup: sometimes\n")

        with pytest.raises(ModuleConfigError):
            load_config(path)

    def test_environment_fills_keys_missing_from_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text("factories: tests/factories\n")
        monkeypatch.setenv("DATAFACTORY_CLEANUP", "false")
        monkeypatch.setenv("DATAFACTORY_FACTORIES", "from/env")

        config = load_config(path)

        assert config.factories == ["tests/factories"]
        assert config.cleanup is False

    def test_overrides_beat_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "datafactory.yaml"
        path.write_text("cleanup: true\n")
        monkeypatch.setenv("DATAFACTORY_CLEANUP", "true")

        assert load_config(path, cleanup=False).cleanup is False
