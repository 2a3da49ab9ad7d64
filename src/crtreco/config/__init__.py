"""Configuration loading system.

This package provides a small YAML configuration loading system with:
- Hierarchical file includes with cycle detection
- Translation of the CamelCase option names (`TimeLimit`, ...) into parameters
- Typed errors

Main Entry Point
----------------
load_config_file : Load a configuration file
"""

from .errors import (
    ConfigCycleError,
    ConfigError,
    ConfigIncludeError,
    ConfigValidationError,
)
from .load import load_config, load_config_file
from .parse import parse_reco_config

__all__ = [
    "load_config",
    "load_config_file",
    "parse_reco_config",
    "ConfigError",
    "ConfigIncludeError",
    "ConfigCycleError",
    "ConfigValidationError",
]
