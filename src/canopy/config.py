from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from canopy.exceptions import ConfigError
from canopy.logging import get_logger

__all__ = [
    "CanopyConfig",
    "TreeOptions",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "canopy.yaml"


class TreeOptions(BaseModel):
    """Mode flags for one tree widget instance.

    Attributes:
        checkable: Nodes carry a check box; Space toggles it.
        selectable: Nodes can be selected; Enter toggles selection.
        multiple: Any number of selected keys instead of at most one.
        default_expand_all: Expand every node with children on mount.
        check_strictly: Checking a node leaves its descendants alone.
        searchable: Show the search input above the tree.
    """

    checkable: bool = True
    selectable: bool = True
    multiple: bool = False
    default_expand_all: bool = False
    check_strictly: bool = False
    searchable: bool = False


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source backed by a single YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(message=f"Invalid YAML in {yaml_file}: {e}") from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Config file {yaml_file} must contain a mapping",
                    value=type(loaded).__name__,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class CanopyConfig(BaseSettings):
    """Root configuration object."""

    model_config = SettingsConfigDict(
        env_prefix="CANOPY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    tree: TreeOptions = Field(default_factory=TreeOptions)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Order settings sources, highest priority first.

        1. Keyword arguments passed to the constructor
        2. Environment variables (CANOPY_*)
        3. Project YAML config (./canopy.yaml or the path given to load_config)
        4. User YAML config (~/.config/canopy/config.yaml)
        """
        project_config_path = _project_config_path.get() or (
            Path.cwd() / PROJECT_CONFIG_NAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


# Set by load_config for the duration of one CanopyConfig() construction.
_project_config_path: ContextVar[Path | None] = ContextVar(
    "canopy_project_config_path", default=None
)


def get_user_config_path() -> Path:
    """Return ``~/.config/canopy/config.yaml``."""
    return Path.home() / ".config" / "canopy" / "config.yaml"


def load_config(config_path: Path | None = None) -> CanopyConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Project config file. Defaults to ``./canopy.yaml``.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If a config file is malformed or a value is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_NAME

    if not config_path.exists():
        logger.info("project_config_missing", path=str(config_path))

    token = _project_config_path.set(config_path)
    try:
        return CanopyConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_path.reset(token)
