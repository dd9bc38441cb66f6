"""pytest plugin wiring DataFactory into the test session lifecycle.

Enable it by installing the package (it registers a ``pytest11`` entry
point), then provide the ORM dependency in your ``conftest.py``:

    @pytest.fixture(scope="session")
    def datafactory_orm(db_session):
        return SQLAlchemyModule(db_session)

and use the ``datafactory`` fixture in tests:

    def test_profile(datafactory):
        user = datafactory.have("User", {"is_active": True})
        ...

Records created with ``have``/``have_multiple`` are deleted after each test
unless ``cleanup: false`` is configured or the ORM module handles cleanup.

Configuration comes from ``datafactory.yaml`` in the rootdir, the
``datafactory_config`` ini option or ``--datafactory-config``. A single test
can override it with ``@pytest.mark.datafactory(cleanup=False)``.
Blueprints added with ``datafactory.define`` are kept across such overrides.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from datafactory.config import DEFAULT_CONFIG_FILE, DataFactoryConfig, load_config
from datafactory.coordinator import DEPENDENCY_MESSAGE, DataFactory
from datafactory.errors import DataFactoryError, DependencyError

logger = logging.getLogger(__name__)

config_key = pytest.StashKey[DataFactoryConfig]()
root_dir_key = pytest.StashKey[Path]()
coordinator_key = pytest.StashKey[DataFactory]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("datafactory", "test data factories")
    group.addoption(
        "--datafactory-config",
        action="store",
        dest="datafactory_config",
        default=None,
        metavar="PATH",
        help=f"DataFactory configuration file (default: {DEFAULT_CONFIG_FILE} in rootdir)",
    )
    parser.addini(
        "datafactory_config",
        help="DataFactory configuration file, relative to rootdir",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "datafactory(**overrides): reconfigure DataFactory for this test "
        "(factories, customStore, cleanup)",
    )

    path, required = _config_path(config)
    try:
        config.stash[config_key] = load_config(path, required=required)
    except DataFactoryError as e:
        raise pytest.UsageError(e.format_verbose()) from e
    config.stash[root_dir_key] = path.parent
    logger.debug(f"DataFactory config {path} (root: {path.parent})")


def _config_path(config: pytest.Config) -> tuple[Path, bool]:
    explicit = config.getoption("datafactory_config") or config.getini("datafactory_config")
    if explicit:
        path = Path(explicit)
        if not path.is_absolute():
            path = config.rootpath / path
        return path, True
    return config.rootpath / DEFAULT_CONFIG_FILE, False


@pytest.fixture(scope="session")
def datafactory_orm() -> Any:
    """The ORM dependency. Override this fixture in your conftest.py."""
    raise DependencyError(DEPENDENCY_MESSAGE)


@pytest.fixture(scope="session")
def datafactory(request: pytest.FixtureRequest, datafactory_orm: Any) -> Iterator[DataFactory]:
    """The session's DataFactory, initialized on first use."""
    config = request.config
    coordinator = DataFactory(config.stash[config_key], root_dir=config.stash[root_dir_key])
    coordinator.inject(datafactory_orm)
    coordinator.before_suite({"rootdir": str(config.rootpath)})
    config.stash[coordinator_key] = coordinator
    yield coordinator
    del config.stash[coordinator_key]


@pytest.fixture(autouse=True)
def _datafactory_lifecycle(request: pytest.FixtureRequest) -> Iterator[None]:
    marker = request.node.get_closest_marker("datafactory")
    if marker is not None:
        request.getfixturevalue("datafactory").reconfigure(**marker.kwargs)

    yield

    # Only sessions that used the datafactory fixture have anything to clean
    coordinator = request.config.stash.get(coordinator_key, None)
    if coordinator is None:
        return
    if marker is None:
        coordinator.after_test(request.node)
        return

    try:
        coordinator.after_test(request.node)
    except Exception:
        # Records that failed to delete stay registered; no second pass here
        coordinator.reset_config(flush=False)
        raise
    coordinator.reset_config()
