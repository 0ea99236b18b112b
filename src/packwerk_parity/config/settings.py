"""
Configuration loader for the parity checker

Settings come from, in increasing priority:
1. Built-in defaults
2. An optional YAML file (PARITY_CONFIG_FILE, default config/parity.yaml)
3. PARITY_* environment variables

The merged mapping is validated against SETTINGS_SCHEMA before use.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import jsonschema
import yaml

from packwerk_parity.cache.layout import DEFAULT_CACHE_DIR, DEFAULT_EXPERIMENTAL_SUFFIX
from packwerk_parity.cache.producer import DEFAULT_PACKS_DIR
from packwerk_parity.cache.units import DEFAULT_UNIT_PATTERN
from packwerk_parity.comparison.normalizer import DEFAULT_KEY_FIELD, DEFAULT_RECORD_FIELD
from packwerk_parity.comparison.report_writer import DEFAULT_REPORT_PATH
from packwerk_parity.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = "config/parity.yaml"
CONFIG_FILE_ENV = "PARITY_CONFIG_FILE"


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


# Setting name -> environment variable
ENV_VARS = {
    "project_root": "PARITY_PROJECT_ROOT",
    "cache_dir": "PARITY_CACHE_DIR",
    "experimental_suffix": "PARITY_EXPERIMENTAL_SUFFIX",
    "report_path": "PARITY_REPORT_PATH",
    "unit_pattern": "PARITY_UNIT_PATTERN",
    "packs_dir": "PARITY_PACKS_DIR",
    "record_field": "PARITY_RECORD_FIELD",
    "key_field": "PARITY_KEY_FIELD",
    "generate_caches": "PARITY_GENERATE_CACHES",
}

DEFAULTS: Dict[str, Any] = {
    "project_root": ".",
    "cache_dir": DEFAULT_CACHE_DIR,
    "experimental_suffix": DEFAULT_EXPERIMENTAL_SUFFIX,
    "report_path": DEFAULT_REPORT_PATH,
    "unit_pattern": DEFAULT_UNIT_PATTERN,
    "packs_dir": DEFAULT_PACKS_DIR,
    "record_field": DEFAULT_RECORD_FIELD,
    "key_field": DEFAULT_KEY_FIELD,
    "generate_caches": True,
}

_NON_EMPTY_STRING = {"type": "string", "minLength": 1}

SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": list(DEFAULTS),
    "properties": {
        "project_root": _NON_EMPTY_STRING,
        "cache_dir": _NON_EMPTY_STRING,
        "experimental_suffix": _NON_EMPTY_STRING,
        "report_path": _NON_EMPTY_STRING,
        "unit_pattern": _NON_EMPTY_STRING,
        "packs_dir": _NON_EMPTY_STRING,
        "record_field": _NON_EMPTY_STRING,
        "key_field": _NON_EMPTY_STRING,
        "generate_caches": {"type": "boolean"},
    },
}


def _parse_bool(value: str) -> Any:
    """Map "true"/"false" style strings to booleans; leave others for the schema."""
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    return value


def _load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load settings overrides from a YAML file.

    Raises:
        ConfigurationError: If the file is unreadable, not YAML or not a mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        logger.warning(f"Empty config file: {path}")
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded settings overrides from {path}")
    return content


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name, variable in ENV_VARS.items():
        raw = environ.get(variable)
        if raw is None:
            continue
        overrides[name] = _parse_bool(raw) if name == "generate_caches" else raw
    return overrides


@dataclass(frozen=True)
class Settings:
    """
    Resolved settings for one run.

    Path-valued settings are kept as given. The cache layout, producer and
    resolved_report_path resolve relative ones against project_root.
    """

    project_root: Path
    cache_dir: Path
    experimental_suffix: str
    report_path: Path
    unit_pattern: str
    packs_dir: Path
    record_field: str
    key_field: str
    generate_caches: bool

    @property
    def resolved_report_path(self) -> Path:
        return self.report_path if self.report_path.is_absolute() else self.project_root / self.report_path

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        """
        Build Settings from a mapping of overrides on top of DEFAULTS.

        Raises:
            ConfigurationError: If the merged mapping fails schema validation
        """
        merged = {**DEFAULTS, **values}
        try:
            jsonschema.validate(instance=merged, schema=SETTINGS_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e.message}") from e

        return cls(
            project_root=Path(merged["project_root"]),
            cache_dir=Path(merged["cache_dir"]),
            experimental_suffix=merged["experimental_suffix"],
            report_path=Path(merged["report_path"]),
            unit_pattern=merged["unit_pattern"],
            packs_dir=Path(merged["packs_dir"]),
            record_field=merged["record_field"],
            key_field=merged["key_field"],
            generate_caches=merged["generate_caches"],
        )

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Load settings from the config file and environment.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Raises:
            ConfigurationError: On unreadable/invalid config or invalid values
        """
        environ = os.environ if environ is None else environ
        env_values = _env_overrides(environ)
        project_root = Path(env_values.get("project_root", DEFAULTS["project_root"]))

        config_value = environ.get(CONFIG_FILE_ENV)
        if config_value:
            config_path = Path(config_value)
            if not config_path.is_absolute():
                config_path = project_root / config_path
            file_values = _load_config_file(config_path)
        else:
            default_path = project_root / DEFAULT_CONFIG_FILE
            file_values = _load_config_file(default_path) if default_path.is_file() else {}

        if "project_root" in file_values:
            logger.warning("project_root in a config file is ignored; use PARITY_PROJECT_ROOT")
            file_values = {k: v for k, v in file_values.items() if k != "project_root"}

        settings = cls.from_mapping({**file_values, **env_values})
        logger.info(
            "Settings loaded",
            operation="load_settings",
            context={
                "project_root": str(settings.project_root),
                "report_path": str(settings.report_path),
                "generate_caches": settings.generate_caches,
            },
        )
        return settings
