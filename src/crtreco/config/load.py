"""Main configuration loading functions.

This module provides the primary entry points for loading configurations:
- load_config(): Load from a YAML string
- load_config_file(): Load from a file path
- _load_config_recursive(): Internal recursive loader with include support
"""

import os
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigCycleError, ConfigIncludeError, ConfigValidationError
from .operations import deep_merge, extract_includes

__all__ = ["load_config", "load_config_file"]


def _load_config_recursive(
    cfg_path: Optional[str] = None,
    config_string: Optional[str] = None,
    root_dir: Optional[str] = None,
    include_stack: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Recursively load config with cycle detection.

    Parameters
    ----------
    cfg_path : Optional[str]
        Path to configuration file (mutually exclusive with config_string)
    config_string : Optional[str]
        YAML configuration string (mutually exclusive with cfg_path)
    root_dir : Optional[str]
        Root directory for resolving relative include paths.
        Defaults to directory of cfg_path when loading from file.
    include_stack : Optional[List[str]]
        Stack of currently-loading files (for cycle detection)

    Returns
    -------
    Dict[str, Any]
        Configuration content, includes resolved

    Raises
    ------
    ConfigCycleError
        If circular include detected
    ConfigIncludeError
        If included file not found
    ConfigValidationError
        If the YAML document is not a mapping
    ValueError
        If both or neither cfg_path and config_string are provided
    """
    # Validate inputs
    if (cfg_path is None) == (config_string is None):
        raise ValueError("Must provide exactly one of cfg_path or config_string")

    # Determine the identifier for cycle detection and root directory
    if cfg_path is not None:
        cfg_path = os.path.abspath(cfg_path)
        identifier = cfg_path
        if root_dir is None:
            root_dir = os.path.dirname(cfg_path)
    else:
        # For string configs, use a pseudo-identifier
        identifier = "<string>"
        if root_dir is None:
            root_dir = os.getcwd()

    # Cycle detection
    if include_stack is None:
        include_stack = []

    if identifier in include_stack and cfg_path is not None:
        cycle = include_stack + [identifier]
        raise ConfigCycleError(cycle)

    include_stack = include_stack + [identifier]

    # Load YAML
    try:
        if cfg_path is not None:
            with open(cfg_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f)
        else:
            main_config = yaml.safe_load(config_string)
    except FileNotFoundError as exc:
        raise ConfigIncludeError(f"Configuration file not found: {cfg_path}") from exc
    except yaml.YAMLError as exc:
        source = cfg_path if cfg_path else "<string>"
        raise ConfigIncludeError(f"Error loading {source}: {exc}") from exc

    if main_config is None:
        return {}

    if not isinstance(main_config, dict):
        source = cfg_path if cfg_path else "<string>"
        raise ConfigValidationError(
            f"Configuration in {source} must be a mapping, "
            f"got {type(main_config).__name__}."
        )

    # Process includes, the including file takes precedence
    config = {}
    for include_file in extract_includes(main_config):
        include_path = include_file
        if not os.path.isabs(include_path):
            include_path = os.path.join(root_dir, include_path)

        included_config = _load_config_recursive(
            cfg_path=include_path, include_stack=include_stack
        )
        config = deep_merge(config, included_config)

    return deep_merge(config, main_config)


def load_config(config_str: str, root_dir: Optional[str] = None) -> Dict[str, Any]:
    """Load a configuration from a YAML string.

    Similar to yaml.safe_load(), but resolves `include` directives.

    Parameters
    ----------
    config_str : str
        YAML configuration string
    root_dir : Optional[str]
        Root directory for resolving relative include paths. If not
        provided, defaults to current working directory.

    Returns
    -------
    Dict[str, Any]
        Loaded and merged configuration
    """
    return _load_config_recursive(config_string=config_str, root_dir=root_dir)


def load_config_file(cfg_path: str) -> Dict[str, Any]:
    """Load a configuration from a YAML file.

    Parameters
    ----------
    cfg_path : str
        Path to the configuration file

    Returns
    -------
    Dict[str, Any]
        Loaded and merged configuration
    """
    return _load_config_recursive(cfg_path=cfg_path)
