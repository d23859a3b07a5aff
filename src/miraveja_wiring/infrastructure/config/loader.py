"""Settings loading with pydantic-settings.

The annotation table is the only configuration surface of the wiring core;
logging settings are carried alongside it for the hosting process.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from miraveja_wiring.domain import AnnotationTable, ConfigurationError
from miraveja_wiring.infrastructure.config.models import LoggingConfig

DEFAULT_CONFIG_FILENAME = ".miraveja-wiring.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", source=str(path)) from e
    if not isinstance(data, dict):
        raise ConfigurationError("Top-level YAML value must be a mapping", source=str(path))
    return data


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: Type[BaseSettings], yaml_config: Dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(self, field: Any, field_name: str) -> Tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> Dict[str, Any]:
        return self._yaml_config


class WiringSettings(BaseSettings):
    """Root settings. Env vars: MIRAVEJA_WIRING__LOGGING__LEVEL, MIRAVEJA_WIRING__ANNOTATIONS__..., etc."""

    model_config = SettingsConfigDict(
        env_prefix="MIRAVEJA_WIRING__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    annotations: AnnotationTable = AnnotationTable()
    logging: LoggingConfig = LoggingConfig()


def _make_settings_class(yaml_config: Dict[str, Any]) -> Type[WiringSettings]:
    """Create a settings class bound to one YAML document."""

    class _FileWiringSettings(WiringSettings):
        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: Type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource,
        ) -> Tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return _FileWiringSettings


def load_settings(config_path: Optional[Path] = None, **kwargs: Any) -> WiringSettings:
    """Load settings: defaults < YAML file < env vars < kwargs.

    Args:
        config_path: YAML file to read. Defaults to ``.miraveja-wiring.yaml`` in
                     the current working directory; a missing file is ignored.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved settings.

    Raises:
        ConfigurationError: On invalid YAML or values that fail validation.

    Example:
        >>> settings = load_settings(Path("wiring.yaml"))
        >>> classifier = AnnotationClassifier(settings.annotations)
    """
    path = config_path or Path.cwd() / DEFAULT_CONFIG_FILENAME
    settings_cls = _make_settings_class(_load_yaml(path))
    try:
        return settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigurationError(f"Invalid value for '{field}': {err['msg']}", source=str(path)) from e
