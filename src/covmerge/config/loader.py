"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (COVMERGE__SECTION__KEY)
3. Repo config (<root>/.covmerge.yaml)
4. Built-in defaults (lowest priority)

After validation every relative path is resolved against the workspace root,
capture.fragment_dir is pinned to fragments.directory, and remap.container_root
is expanded into a trailing rule that maps it onto the workspace root.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from covmerge.config.models import (
    CaptureConfig,
    CovmergeConfig,
    FragmentsConfig,
    LoggingConfig,
    MergeConfig,
    RemapConfig,
    RemapRuleConfig,
)
from covmerge.core.errors import ConfigError

CONFIG_FILENAME = ".covmerge.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


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
    """Create a Settings class with instance-based YAML source."""

    class CovmergeSettings(BaseSettings):
        """Root config. Env vars: COVMERGE__LOGGING__LEVEL, COVMERGE__MERGE__OUTPUT, etc."""

        model_config = SettingsConfigDict(
            env_prefix="COVMERGE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        fragments: FragmentsConfig = FragmentsConfig()
        capture: CaptureConfig = CaptureConfig()
        merge: MergeConfig = MergeConfig()
        remap: RemapConfig = RemapConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return CovmergeSettings


def _resolve(root: Path, value: str) -> str:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return str(path)


def _with_trailing_slash(prefix: str) -> str:
    return prefix if prefix.endswith("/") else prefix + "/"


def _resolve_paths(config: CovmergeConfig, root: Path) -> CovmergeConfig:
    fragment_dir = _resolve(root, config.fragments.directory)

    rules = list(config.remap.rules)
    if config.remap.container_root:
        rules.append(
            RemapRuleConfig(
                from_prefix=_with_trailing_slash(config.remap.container_root),
                to_prefix=_with_trailing_slash(str(root)),
            )
        )

    return config.model_copy(
        update={
            "fragments": config.fragments.model_copy(update={"directory": fragment_dir}),
            "capture": config.capture.model_copy(
                update={
                    "fragment_dir": fragment_dir,
                    "source": [_resolve(root, s) for s in config.capture.source],
                }
            ),
            "merge": config.merge.model_copy(
                update={
                    "include": [_resolve(root, d) for d in config.merge.include],
                    "output": _resolve(root, config.merge.output),
                }
            ),
            "remap": config.remap.model_copy(
                update={
                    "rules": rules,
                    "coverage_file": _resolve(root, config.remap.coverage_file),
                    "nyc_config": _resolve(root, config.remap.nyc_config),
                }
            ),
        }
    )


def load_config(repo_root: Path | None = None, **kwargs: Any) -> CovmergeConfig:
    """Load config: defaults < .covmerge.yaml < env vars < kwargs.

    Args:
        repo_root: Workspace root. Defaults to the current working directory.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object with absolute paths.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    root = (repo_root or Path.cwd()).resolve()
    yaml_config = _load_yaml(root / CONFIG_FILENAME)
    if not isinstance(yaml_config, dict):
        raise ConfigError.parse_error(
            str(root / CONFIG_FILENAME), "top-level document must be a mapping"
        )

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    config = CovmergeConfig.model_validate(settings.model_dump())
    return _resolve_paths(config, root)
