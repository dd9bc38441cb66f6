"""Load blueprint definition files from disk.

A factory file is a plain Python module. It is executed with the engine
bound to the module-level name ``fm``:

    # tests/factories/users.py
    from datafactory import Faker
    from app.models import Profile, User

    fm.define(Profile).set_definitions({"bio": Faker.sentence()})
    fm.define(User).set_definitions({
        "name": Faker.name(),
        "profile": "entity|Profile",
    })

Directories are searched recursively. Files whose name starts with an
underscore (``__init__.py``, ``_helpers.py``) are skipped.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from datafactory.errors import DirectoryNotFoundError

if TYPE_CHECKING:
    from datafactory.engine.factory import FactoryEngine

logger = logging.getLogger(__name__)


def find_factory_files(path: str | Path) -> list[Path]:
    """List the factory files under ``path`` in a stable order.

    Raises:
        DirectoryNotFoundError: If ``path`` does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise DirectoryNotFoundError(path)

    if path.is_file():
        return [path]

    return sorted(
        file_path
        for file_path in path.rglob("*.py")
        if not file_path.name.startswith("_") and "__pycache__" not in file_path.parts
    )


def load_factory_file(engine: FactoryEngine, file_path: str | Path) -> None:
    """Execute one factory file against ``engine``.

    Exceptions raised by the file (including definition conflicts) propagate
    unchanged.
    """
    file_path = Path(file_path).resolve()
    digest = hashlib.sha1(str(file_path).encode("utf-8")).hexdigest()[:12]
    module_name = f"datafactory_factories_{file_path.stem}_{digest}"

    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot create module spec for {file_path}")

    module = importlib.util.module_from_spec(spec)
    module.fm = engine  # type: ignore[attr-defined]
    # Registered only while the file executes
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)

    logger.debug(f"Loaded factory file {file_path}")


def load_factories(engine: FactoryEngine, paths: str | Path | list[str | Path]) -> list[Path]:
    """Load every factory file found under ``paths``, in order.

    Returns:
        The files that were executed.
    """
    if isinstance(paths, (str, Path)):
        paths = [paths]

    loaded: list[Path] = []
    for path in paths:
        for file_path in find_factory_files(path):
            load_factory_file(engine, file_path)
            loaded.append(file_path)

    logger.info(f"Loaded {len(loaded)} factory file(s), {len(engine.definitions())} definition(s)")
    return loaded
