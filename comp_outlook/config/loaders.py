# comp_outlook/config/loaders.py
"""
Load the engine configuration: YAML -> cerberus section check -> deep merge
over the packaged defaults -> pydantic ``EngineConfig``.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from comp_outlook.config.models import EngineConfig
from comp_outlook.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default_config.yaml")


def _pct() -> Dict[str, Any]:
    return {"type": "number"}


# Section-level shape check; field semantics are validated by the pydantic models.
CONFIG_SCHEMA = {
    "scenarios": {
        "type": "dict",
        "required": False,
        "schema": {
            "raise_min_pct": _pct(),
            "raise_max_pct": _pct(),
            "growth_min_pct": _pct(),
            "growth_max_pct": _pct(),
            "defaults": {"type": "dict", "valuesrules": _pct()},
        },
    },
    "milestones": {
        "type": "dict",
        "required": False,
        "schema": {
            "min_year": {"type": "integer"},
            "max_year": {"type": "integer"},
            "bump_max_pct": _pct(),
            "max_combined": {"type": "integer", "min": 0},
        },
    },
    "benchmarks": {
        "type": "dict",
        "required": False,
        "keysrules": {"type": "string", "regex": r"^[^|]*\|[^|]*$"},
        "valuesrules": {
            "type": "dict",
            "schema": {
                "median": {"type": "number", "required": True},
                "top": {"type": "number", "required": True},
            },
        },
    },
    "recommendations": {"type": "dict", "required": False, "valuesrules": _pct()},
    "enrichment": {"type": "dict", "required": False},
    "comparison": {
        "type": "dict",
        "required": False,
        "schema": {
            "baseline_col_index": {"type": "number"},
            "financial_weight": {"type": "number", "min": 0, "max": 1},
            "default_rating": {"type": "number", "min": 1, "max": 5},
        },
    },
}


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads configuration data from a YAML file.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or is not a mapping.
    """
    config_path = Path(config_path)
    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception(f"Error parsing YAML configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e

    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        logger.error(f"Configuration file {config_path} did not parse into a dictionary.")
        raise ConfigLoadError(
            f"Invalid configuration format in {config_path}: Expected a dictionary."
        )
    return config_data


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def parse_engine_config(config_data: Dict[str, Any]) -> EngineConfig:
    """Validate a config mapping (already merged with defaults) into an EngineConfig."""
    v = Validator(CONFIG_SCHEMA, allow_unknown=False)
    if not v.validate(config_data):
        raise ConfigLoadError(f"Config validation failed: {v.errors}")
    try:
        return EngineConfig(**config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Config validation failed: {e}") from e


def load_engine_config(config_path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load the packaged defaults, deep-merge an optional user file over them,
    and validate the result.
    """
    config_data = load_yaml_config(DEFAULT_CONFIG_PATH)
    if config_path is not None:
        config_data = deep_merge(config_data, load_yaml_config(config_path))
    config = parse_engine_config(config_data)
    logger.debug(f"Engine configuration loaded: {config.model_dump()}")
    return config


@lru_cache()
def get_engine_config() -> EngineConfig:
    """Packaged default configuration, loaded once."""
    return load_engine_config()


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "deep_merge",
    "get_engine_config",
    "load_engine_config",
    "load_yaml_config",
    "parse_engine_config",
]
