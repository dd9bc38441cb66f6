"""Small helpers shared across DataFactory."""

from __future__ import annotations

import importlib
from typing import Any


def import_string(path: str) -> Any:
    """Import an object from ``"pkg.module:Name"`` or ``"pkg.module.Name"``.

    Nested attributes are allowed after the colon (``"pkg.mod:Outer.Inner"``).

    Raises:
        ImportError: If the module or attribute cannot be found.
    """
    path = path.strip()
    if ":" in path:
        module_path, _, attr_path = path.partition(":")
    else:
        module_path, _, attr_path = path.rpartition(".")

    if not module_path or not attr_path:
        raise ImportError(f"'{path}' is not an import path")

    module = importlib.import_module(module_path)
    obj: Any = module
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ImportError(f"Module '{module_path}' has no attribute '{attr_path}'") from e
    return obj
