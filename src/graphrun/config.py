"""Runner settings for graphrun.

Settings control how the engine runs a graph, not what the graph does; the
graph itself is described by the GraphConfig document
(see ``graphrun.dsl.serialization.schema``).

Priority (highest to lowest):
1. Environment variables (GRAPHRUN_*)
2. Project YAML settings (./graphrun.yaml or an explicit path)
3. Built-in defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Literal

import yaml
from pydantic import Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from graphrun.exceptions import ConfigError
from graphrun.logging import get_logger

__all__ = [
    "RunnerSettings",
    "load_settings",
    "DEFAULT_SETTINGS_FILE",
]

logger = get_logger(__name__)

DEFAULT_SETTINGS_FILE = "graphrun.yaml"


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from a YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._settings_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e
            if loaded is None:
                logger.warning(f"Settings file {yaml_file} is empty, using defaults.")
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Settings file {yaml_file} must contain a mapping",
                    field=None,
                    value=type(loaded).__name__,
                )
            else:
                self._settings_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML settings."""
        if field_name in self._settings_data:
            return self._settings_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._settings_data


class RunnerSettings(BaseSettings):
    """Settings for the graph runner.

    Attributes:
        http_timeout_seconds: Total timeout applied to every outbound request
            issued by an ``http`` executor.
        max_interpolation_passes: Upper bound on ``{{ }}`` substitutions
            performed on a single string. Replacement values that themselves
            contain ``{{`` are scanned again, so the bound stops runaway
            self-expanding templates.
        default_start_node: Node name used when the caller does not pass one.
        verbosity: Log level used by the CLI when no -v/-q flag is given.
        settings_file: YAML file read by this class. None means
            ./graphrun.yaml in the working directory. load_settings() sets it
            on a per-call subclass.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRAPHRUN_",
        extra="ignore",
    )

    http_timeout_seconds: float = Field(default=30.0, gt=0.0, le=3600.0)
    max_interpolation_passes: int = Field(default=1000, ge=1)
    default_start_node: str = Field(default="start", min_length=1)
    verbosity: Literal["error", "warning", "info", "debug"] = "info"

    settings_file: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Earlier sources have higher priority: explicit init kwargs, then
        GRAPHRUN_* environment variables, then the YAML settings file.
        """
        settings_file = cls.settings_file or (Path.cwd() / DEFAULT_SETTINGS_FILE)
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls, settings_file),
        )


def load_settings(settings_path: Path | None = None) -> RunnerSettings:
    """Load runner settings with hierarchy: defaults -> YAML file -> env.

    Args:
        settings_path: Optional path to a settings file. Defaults to
            ./graphrun.yaml when present.

    Returns:
        RunnerSettings instance with merged settings.

    Raises:
        ConfigError: If the settings are invalid.
    """
    if settings_path is not None and not settings_path.exists():
        raise ConfigError(
            message=f"Settings file not found: {settings_path}",
            field=None,
            value=str(settings_path),
        )

    settings_cls: type[RunnerSettings] = RunnerSettings
    if settings_path is not None:
        settings_cls = type(
            "RunnerSettings", (RunnerSettings,), {"settings_file": settings_path}
        )

    try:
        return settings_cls()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid settings: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
