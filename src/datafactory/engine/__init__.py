"""Record factory engine built on Faker."""

from datafactory.engine.definition import Definition
from datafactory.engine.factory import FactoryEngine
from datafactory.engine.fake import Faker, FakerFacade
from datafactory.engine.generators import LazyAttribute, LazyFunction
from datafactory.engine.loader import find_factory_files, load_factories, load_factory_file

__all__ = [
    "Definition",
    "FactoryEngine",
    "Faker",
    "FakerFacade",
    "LazyAttribute",
    "LazyFunction",
    "find_factory_files",
    "load_factories",
    "load_factory_file",
]
