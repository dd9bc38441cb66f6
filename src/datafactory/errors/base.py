"""Custom exception hierarchy for DataFactory.

All DataFactory errors inherit from DataFactoryError and include:
- error_code: A unique ErrorCode enum for categorization
- suggestions: List of actionable steps to resolve the issue
- cause: The underlying exception (if any)

Configuration errors stop the test session from initializing. Definition
and persistence errors stop the single operation that raised them and are
surfaced to the test unchanged.

Example:
    try:
        factory.have("User")
    except DefinitionNotFoundError as e:
        print(e.format_verbose())
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for DataFactory.

    Error codes are organized by category:
    - E2xx: Configuration errors
    - E3xx: Definition errors
    - E4xx: Persistence errors
    - E9xx: Unknown/internal errors
    """

    # Configuration errors (E2xx)
    INVALID_CONFIG = "E201"
    CONFIG_LOAD_FAILED = "E202"
    DEPENDENCY_MISSING = "E203"
    DIRECTORY_NOT_FOUND = "E204"

    # Definition errors (E3xx)
    DEFINITION_ALREADY_DEFINED = "E301"
    DEFINITION_NOT_FOUND = "E302"
    MODEL_NOT_FOUND = "E303"

    # Persistence errors (E4xx)
    SAVE_FAILED = "E401"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if 200 <= code_num < 300:
            return "configuration"
        elif 300 <= code_num < 400:
            return "definition"
        elif 400 <= code_num < 500:
            return "persistence"
        return "unknown"


class DataFactoryError(Exception):
    """Base exception for all DataFactory errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        suggestions: List of actionable steps to resolve the issue
        cause: The underlying exception (if any)
        context: Extra key/value details about where the error happened
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        cause: Exception | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.cause = cause
        self.context: dict[str, Any] = dict(extra_context)
        self._suggestions = suggestions

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [f"Error [{self.error_code.value}]: {self.message}"]

        for key, value in self.context.items():
            lines.append(f"  {key}: {value}")

        if self.cause is not None:
            lines.append(f"Caused by: {self.cause!r}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "context": {k: repr(v) for k, v in self.context.items()},
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# Configuration errors
# =============================================================================


class ModuleConfigError(DataFactoryError):
    """The DataFactory configuration is invalid.

    Raised at session start or on reconfiguration, for example when a
    ``factories`` entry does not exist or ``customStore`` cannot be resolved.
    """

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid DataFactory configuration"
    default_suggestions = [
        "Run 'datafactory doctor' to check the configuration",
        "Paths under 'factories' are relative to the directory of datafactory.yaml",
    ]


class ConfigLoadError(ModuleConfigError):
    """The configuration file could not be read or parsed."""

    error_code = ErrorCode.CONFIG_LOAD_FAILED
    default_message = "Failed to load DataFactory configuration"
    default_suggestions = [
        "Check datafactory.yaml syntax with a YAML linter",
        "Pass an explicit file with --datafactory-config",
    ]


class DependencyError(ModuleConfigError):
    """No usable ORM dependency was provided before the session started."""

    error_code = ErrorCode.DEPENDENCY_MISSING
    default_message = "An ORM dependency is required by DataFactory"
    default_suggestions = [
        "Override the 'datafactory_orm' fixture in your conftest.py",
        "The returned object must implement get_config() and get_entity_manager()",
    ]


# =============================================================================
# Engine errors
# =============================================================================


class DirectoryNotFoundError(DataFactoryError):
    """A factory definitions path does not exist."""

    error_code = ErrorCode.DIRECTORY_NOT_FOUND
    default_message = "Factory definitions path not found"

    def __init__(self, path: Any, **kwargs: Any) -> None:
        self.path = path
        super().__init__(message=f"The directory '{path}' was not found", path=path, **kwargs)


class DefinitionAlreadyDefinedError(DataFactoryError):
    """A blueprint with the same name is already defined on the engine."""

    error_code = ErrorCode.DEFINITION_ALREADY_DEFINED
    default_message = "Definition already defined"

    def __init__(self, name: str, **kwargs: Any) -> None:
        self.name = name
        super().__init__(
            message=f"The model definition '{name}' has already been defined",
            definition=name,
            **kwargs,
        )


class DefinitionNotFoundError(DataFactoryError):
    """No blueprint with the requested name exists on the engine."""

    error_code = ErrorCode.DEFINITION_NOT_FOUND
    default_message = "Definition not found"
    default_suggestions = [
        "Check the blueprint is defined in one of the 'factories' directories",
        "Group definitions ('group:Name') need the base 'Name' defined first",
    ]

    def __init__(self, name: str, **kwargs: Any) -> None:
        self.name = name
        super().__init__(
            message=f"The model definition '{name}' is undefined",
            definition=name,
            **kwargs,
        )


class ModelNotFoundError(DataFactoryError):
    """The model class of a blueprint could not be resolved."""

    error_code = ErrorCode.MODEL_NOT_FOUND
    default_message = "Model not found"
    default_suggestions = [
        "Define the blueprint with the model class itself: fm.define(User)",
        "Or pass model=... or use an import path such as 'app.models:User'",
    ]

    def __init__(self, model: str, cause: Exception | None = None, **kwargs: Any) -> None:
        self.model = model
        super().__init__(
            message=f"No class was defined for the model '{model}'",
            cause=cause,
            model=model,
            **kwargs,
        )


# =============================================================================
# Persistence errors
# =============================================================================


class SaveFailedError(DataFactoryError):
    """A model reported that it could not be saved."""

    error_code = ErrorCode.SAVE_FAILED
    default_message = "Saving model failed"

    def __init__(self, model: str, errors: str | None = None, **kwargs: Any) -> None:
        self.model = model
        self.errors = errors
        message = f"We could not save the model '{model}'"
        if errors:
            message += f" with errors: {errors}"
        super().__init__(message=message, model=model, **kwargs)
