from __future__ import annotations

from typing import Any

from graphrun.exceptions.base import GraphRunError


class ConfigError(GraphRunError):
    """Exception for runner settings loading and validation errors.

    Raised when runner settings cannot be loaded or validated. This includes
    YAML parsing failures of the settings file, Pydantic validation errors,
    and invalid GRAPHRUN_* environment variable values.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "http_timeout_seconds").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError(
            "Invalid configuration value",
            field="max_interpolation_passes",
            value=0,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
