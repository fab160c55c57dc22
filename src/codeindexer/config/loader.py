"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (CODEINDEXER__SECTION__KEY)
3. Repo config (.codeindexer/config.yaml)
4. Global config (~/.config/codeindexer/config.yaml)
5. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from codeindexer.config.constants import CONFIG_DIRNAME, DEFAULT_INDEX_DIRNAME
from codeindexer.config.models import (
    CodeIndexerConfig,
    IndexConfig,
    LimitsConfig,
    LoggingConfig,
)
from codeindexer.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/codeindexer/config.yaml").expanduser()


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class CodeIndexerSettings(BaseSettings):
        """Root config. Env vars: CODEINDEXER__LOGGING__LEVEL, CODEINDEXER__INDEX__..., etc."""

        model_config = SettingsConfigDict(
            env_prefix="CODEINDEXER__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        index: IndexConfig = IndexConfig()
        limits: LimitsConfig = LimitsConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return CodeIndexerSettings


CodeIndexerSettings = _make_settings_class({})


def load_config(root: Path | None = None, **kwargs: Any) -> CodeIndexerConfig:
    """Load config: defaults < global yaml < repo yaml < env vars < kwargs.

    Args:
        root: Directory holding .codeindexer/config.yaml.
              Defaults to current working directory.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    root = root or Path.cwd()

    yaml_config = _load_yaml(root / CONFIG_DIRNAME / "config.yaml")

    global_config = _load_yaml(GLOBAL_CONFIG_PATH)
    if global_config:
        yaml_config = _deep_merge(global_config, yaml_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return CodeIndexerConfig.model_validate(settings.model_dump())


def get_index_path(root: Path, config: CodeIndexerConfig | None = None) -> Path:
    """Get the Tantivy directory for a root, respecting config.index.index_path."""
    config = config or load_config(root)
    if config.index.index_path:
        return Path(config.index.index_path).expanduser()
    return root / CONFIG_DIRNAME / DEFAULT_INDEX_DIRNAME
