"""Error hierarchy for DataFactory."""

from datafactory.errors.base import (
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

__all__ = [
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
