"""Application configuration with YAML + env vars + CLI override support."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass
class OutputConfig:
    directory: str = "output"
    extract: bool = True


@dataclass
class ListingConfig:
    verbose: bool = False
    debug: bool = False  # hex dumps of raw records


@dataclass
class FormatConfig:
    variant: str = "backup"  # backup | settable | exormacs | indexed


@dataclass
class AppConfig:
    output: OutputConfig = field(default_factory=OutputConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
    format: FormatConfig = field(default_factory=FormatConfig)


# Mapping: env var name -> (section, field)
_ENV_MAPPING: dict[str, tuple[str, str]] = {
    "EXORMACS_OUTPUT_DIR": ("output", "directory"),
    "EXORMACS_EXTRACT": ("output", "extract"),
    "EXORMACS_VERBOSE": ("listing", "verbose"),
    "EXORMACS_DEBUG": ("listing", "debug"),
    "EXORMACS_VARIANT": ("format", "variant"),
}

_TRUE_STRINGS = ("true", "1", "yes", "on")


def load_config(
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load configuration with priority: YAML < env vars < CLI overrides.

    Args:
        config_path: Path to YAML config file. None to skip.
        cli_overrides: Dict of CLI overrides in format {"section.field": value}.
            None values are skipped (means CLI option was not provided).
    """
    config = AppConfig()

    if config_path:
        _apply_yaml(config, config_path)

    _apply_env_vars(config)

    if cli_overrides:
        _apply_overrides(config, cli_overrides)

    return config


def _apply_yaml(config: AppConfig, config_path: str) -> None:
    path = Path(config_path)
    if not path.is_file():
        logger.warning("Config file not found: %s, using defaults", config_path)
        return

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        logger.warning("Config file is not a valid YAML mapping: %s", config_path)
        return

    for section_name, section_data in data.items():
        if not isinstance(section_data, dict):
            continue
        section = getattr(config, section_name, None)
        if section is None:
            logger.debug("Unknown config section: %s", section_name)
            continue
        _set_section_fields(section, section_data)

    logger.info("Loaded config from %s", config_path)


def _apply_env_vars(config: AppConfig) -> None:
    for env_name, (section_name, field_name) in _ENV_MAPPING.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        _set_field_value(getattr(config, section_name), field_name, value)


def _apply_overrides(config: AppConfig, overrides: dict[str, Any]) -> None:
    """Apply CLI overrides in format {'section.field': value}."""
    for key, value in overrides.items():
        if value is None:
            continue
        parts = key.split(".", 1)
        if len(parts) != 2:
            continue
        section_name, field_name = parts
        section = getattr(config, section_name, None)
        if section is None:
            continue
        _set_field_value(section, field_name, value)


def _set_section_fields(section: Any, data: dict[str, Any]) -> None:
    section_fields = {f.name for f in fields(section)}
    for key, value in data.items():
        if key in section_fields and value is not None:
            _set_field_value(section, key, value)


def _set_field_value(section: Any, field_name: str, value: Any) -> None:
    field_info = {f.name: f for f in fields(section)}.get(field_name)
    if field_info is None:
        return
    setattr(section, field_name, _coerce_value(value, field_info.type))


def _coerce_value(value: Any, type_hint: str | type) -> bool | str:
    # Every option is either a flag or a string (paths, variant names).
    if type_hint in ("bool", bool):
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)
    return str(value)
