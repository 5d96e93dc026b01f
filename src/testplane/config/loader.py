"""Resolve ``TestPlaneConfig`` from YAML files, environment and overrides.

Later layers win: global YAML, then workspace YAML, then ``TESTPLANE__*``
environment variables, then keyword overrides. YAML layers are merged key
by key, so a workspace file only needs the values it changes.
"""

from functools import reduce
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from testplane.config.models import (
    DebugConfig,
    LoggingConfig,
    RunnerConfig,
    TestPlaneConfig,
    WatchConfig,
)
from testplane.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/testplane/config.yaml").expanduser()
WORKSPACE_CONFIG_DIR = ".testplane"
CONFIG_FILENAME = "config.yaml"


def config_paths(workspace_root: Path) -> list[Path]:
    """YAML layers in ascending precedence."""
    return [GLOBAL_CONFIG_PATH, workspace_root / WORKSPACE_CONFIG_DIR / CONFIG_FILENAME]


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML layer; a missing file is an empty layer."""
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested mappings merge, the rest replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class _LayeredYamlSource(PydanticBaseSettingsSource):
    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self.data = data

    def get_field_value(
        self,
        field: FieldInfo,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self.data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {name: value for name, value in self.data.items() if value is not None}


def _settings_for(yaml_data: dict[str, Any]) -> type[BaseSettings]:
    class TestPlaneSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="TESTPLANE__",
            env_nested_delimiter="__",
            case_sensitive=False,
            extra="ignore",
        )

        logging: LoggingConfig = LoggingConfig()
        runner: RunnerConfig = RunnerConfig()
        watch: WatchConfig = WatchConfig()
        debug: DebugConfig = DebugConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # First source wins
            return init_settings, env_settings, _LayeredYamlSource(settings_cls, yaml_data)

    return TestPlaneSettings


def load_config(workspace_root: Path | None = None, **overrides: Any) -> TestPlaneConfig:
    """Load the configuration for ``workspace_root`` (default: cwd).

    Raises:
        ConfigError: A YAML layer does not parse, or a value does not validate.
    """
    root = workspace_root or Path.cwd()
    yaml_data = reduce(_deep_merge, (_load_yaml(p) for p in config_paths(root)), {})

    try:
        settings = _settings_for(yaml_data)(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(where, first.get("input"), first["msg"]) from e

    return TestPlaneConfig.model_validate(settings.model_dump())
