"""Attribute generators used by blueprint definitions.

A definition maps attribute names to values. At creation time each value is
resolved by ``generate``:

- ``LazyAttribute(func)``: ``func(obj)`` where ``obj`` exposes the
  attributes generated so far (``obj.first_name``).
- ``LazyFunction(func)``: ``func()``. The Faker facade produces these.
- Any other non-class callable: called with no arguments.
- ``"factory|User"``: a related ``User`` record is generated and its ``id``
  is used.
- ``"entity|User"``: a related ``User`` record is generated and the record
  itself is used.
- Anything else is used as-is.

Related records follow the parent: they are persisted when the parent is
created with ``create`` and only instantiated when the parent comes from
``instance``.
"""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datafactory.engine.factory import FactoryEngine

FACTORY_PREFIX = "factory|"
ENTITY_PREFIX = "entity|"


class LazyAttribute:
    """Lazy attribute that evaluates a callable with the attributes built so far."""

    def __init__(self, func: Callable[[Any], Any]):
        self.func = func

    def evaluate(self, obj: Any = None) -> Any:
        return self.func(obj)


class LazyFunction:
    """Lazy attribute that calls a function with no arguments."""

    def __init__(self, func: Callable[[], Any]):
        self.func = func

    def evaluate(self) -> Any:
        return self.func()

    def __repr__(self) -> str:
        return f"LazyFunction({getattr(self.func, '__qualname__', self.func)!r})"


def generate(
    value: Any,
    attributes: dict[str, Any],
    engine: FactoryEngine,
    saved: bool,
) -> Any:
    """Resolve one definition value to a concrete attribute value."""
    if isinstance(value, LazyAttribute):
        return value.evaluate(SimpleNamespace(**attributes))
    elif isinstance(value, LazyFunction):
        return value.evaluate()
    elif isinstance(value, str):
        if value.startswith(FACTORY_PREFIX):
            related = _related(value[len(FACTORY_PREFIX):], engine, saved)
            return getattr(related, "id", None)
        elif value.startswith(ENTITY_PREFIX):
            return _related(value[len(ENTITY_PREFIX):], engine, saved)
        return value
    elif callable(value) and not isinstance(value, type):
        return value()
    return value


def generate_all(
    definitions: dict[str, Any],
    engine: FactoryEngine,
    saved: bool,
) -> dict[str, Any]:
    """Resolve every definition value, in definition order."""
    attributes: dict[str, Any] = {}
    for key, value in definitions.items():
        attributes[key] = generate(value, attributes, engine, saved)
    return attributes


def _related(name: str, engine: FactoryEngine, saved: bool) -> Any:
    if saved:
        return engine.create(name)
    return engine.instance(name)
