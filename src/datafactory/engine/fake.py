"""Faker facade for blueprint definitions.

Calling a provider on the facade does not produce a value; it produces a
``LazyFunction`` that calls the shared ``faker.Faker`` each time a record is
generated, so every record gets fresh data.

Example:
    >>> from datafactory import Faker
    >>>
    >>> fm.define(User).set_definitions({
    ...     "name": Faker.name(),
    ...     "email": Faker.unique.email(),
    ...     "nickname": Faker.optional(0.3).user_name(),
    ...     "bio": Faker.paragraph(nb_sentences=2),
    ... })
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from faker import Faker as _Faker

from datafactory.engine.generators import LazyFunction


class _ProviderProxy:
    """Turns ``proxy.provider(*args)`` into a LazyFunction."""

    def __init__(self, source: Callable[[], Any], wrap: Callable[[Callable[[], Any]], Any] | None = None):
        self._source = source
        self._wrap = wrap

    def __getattr__(self, name: str) -> Callable[..., LazyFunction]:
        if name.startswith("_"):
            raise AttributeError(name)

        def provider(*args: Any, **kwargs: Any) -> LazyFunction:
            def call() -> Any:
                return getattr(self._source(), name)(*args, **kwargs)

            if self._wrap is not None:
                return LazyFunction(self._wrap(call))
            return LazyFunction(call)

        provider.__name__ = name
        return provider


class FakerFacade(_ProviderProxy):
    """Lazily creates and shares one ``faker.Faker`` instance."""

    def __init__(self, locale: str | None = None) -> None:
        super().__init__(self.instance)
        self._locale = locale
        self._faker: _Faker | None = None

    def instance(self) -> _Faker:
        """Return the underlying ``faker.Faker``, creating it on first use."""
        if self._faker is None:
            self._faker = _Faker(self._locale)
        return self._faker

    def set_locale(self, locale: str | None) -> None:
        """Switch locale; the next generated value uses a new instance."""
        self._locale = locale
        self._faker = None

    def seed(self, value: int) -> None:
        """Seed the generator for reproducible data."""
        self.instance().seed_instance(value)

    @property
    def unique(self) -> _ProviderProxy:
        """Providers whose values never repeat for this instance."""
        return _ProviderProxy(lambda: self.instance().unique)

    def optional(self, weight: float = 0.5, default: Any = None) -> _ProviderProxy:
        """Providers that return ``default`` with probability ``1 - weight``."""
        if not 0.0 <= weight <= 1.0:
            raise ValueError("weight must be between 0 and 1")

        def wrap(call: Callable[[], Any]) -> Callable[[], Any]:
            def maybe() -> Any:
                if self.instance().random.random() < weight:
                    return call()
                return default

            return maybe

        return _ProviderProxy(self.instance, wrap)


Faker = FakerFacade()
